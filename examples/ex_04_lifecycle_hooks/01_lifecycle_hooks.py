"""Lifecycle hooks: decorators, method injection and after-resolving callbacks.

Hooks run in this order on every freshly built value: decorators (each
wrapping the previous result), method-injection directives, then
after-resolving callbacks.
"""

from __future__ import annotations

from servicewire import Container


class Clock:
    now = "2024-01-01T00:00:00"


class Notifier:
    def send(self, message: str) -> str:
        return message


class LoudNotifier(Notifier):
    def __init__(self, inner: Notifier) -> None:
        self.inner = inner

    def send(self, message: str) -> str:
        return self.inner.send(message).upper()


class Tracer:
    def __init__(self) -> None:
        self.events: list[str] = []


class ReportService:
    def __init__(self) -> None:
        self.clock: Clock | None = None
        self.channel = ""

    def configure(self, clock: Clock, channel: str) -> None:
        self.clock = clock
        self.channel = channel


def main() -> None:
    container = Container()
    tracer = Tracer()

    container.decorate(Notifier, LoudNotifier)
    container.after_resolving(Notifier, lambda notifier: tracer.events.append("notifier"))
    print(f"sent={container.resolve(Notifier).send('hello')}")  # => sent=HELLO
    print(f"events={tracer.events}")  # => events=['notifier']

    container.method_injection(ReportService, "configure", {"channel": "email"})
    report = container.resolve(ReportService)
    print(f"clock={report.clock.now if report.clock else None}")  # => clock=2024-01-01T00:00:00
    print(f"channel={report.channel}")  # => channel=email


if __name__ == "__main__":
    main()
