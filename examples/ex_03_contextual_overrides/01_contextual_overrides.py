"""Contextual overrides: give one consumer a different implementation.

``when(Consumer).needs(Dependency).give(Implementation)`` only applies while
``Consumer`` itself is being built. Everyone else keeps the default binding.
"""

from __future__ import annotations

from typing import Annotated

from servicewire import Container, Named


class Logger:
    target = "stdout"


class FileLogger(Logger):
    target = "file"


class NullLogger(Logger):
    target = "null"


class PaymentGateway:
    def __init__(self, logger: Logger) -> None:
        self.logger = logger


class ReportJob:
    def __init__(self, logger: Logger) -> None:
        self.logger = logger


class Mailer:
    def __init__(self, transport: Annotated[str, Named("mail.transport")]) -> None:
        self.transport = transport


def main() -> None:
    container = Container()
    container.bind(Logger)
    container.when(PaymentGateway).needs(Logger).give(FileLogger)
    container.when(ReportJob).needs(Logger).give(NullLogger)

    gateway = container.resolve(PaymentGateway)
    job = container.resolve(ReportJob)
    print(f"gateway={gateway.logger.target}")  # => gateway=file
    print(f"job={job.logger.target}")  # => job=null
    print(f"default={container.resolve(Logger).target}")  # => default=stdout

    container.instance("mail.transport", "smtp")
    container.when(Mailer).needs("mail.transport").give(lambda: "sendmail")
    print(f"transport={container.resolve(Mailer).transport}")  # => transport=sendmail


if __name__ == "__main__":
    main()
