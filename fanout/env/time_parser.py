import re
from datetime import timedelta

duration_pattern = re.compile(r"(?P<amount>\d+(?:\.\d+)?)(?P<unit>[smhdw]?)", flags=re.I)


class TimeParser:
    """
    Converts duration strings such as "30s", "1.5m" or "1h30m" to seconds.
    A bare number is read as seconds.
    """

    units = {
        "": "seconds",
        "s": "seconds",
        "m": "minutes",
        "h": "hours",
        "d": "days",
        "w": "weeks",
    }

    def parse(self, duration: str) -> float:
        duration = duration.strip()
        parts = list(duration_pattern.finditer(duration))

        if not parts or "".join(part.group(0) for part in parts) != duration:
            raise ValueError(f"Invalid duration: {duration!r}")

        total = timedelta()
        for part in parts:
            total += timedelta(
                **{self.units[part.group("unit").lower()]: float(part.group("amount"))}
            )

        return total.total_seconds()
