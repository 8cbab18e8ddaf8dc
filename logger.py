import logging
import os

# SGR parameters, see https://en.wikipedia.org/wiki/ANSI_escape_code#SGR
SGR_CODES = {
    "RESET": 0,
    "BOLD": 1,
    "DIM": 2,
    "RED": 31,
    "GREEN": 32,
    "YELLOW": 33,
    "BLUE": 34,
    "MAGENTA": 35,
    "CYAN": 36,
}


def sgr(*names):
    return "\x1b[" + ";".join(str(SGR_CODES[n]) for n in names) + "m"


class ColorizingStreamHandler(logging.StreamHandler):
    """Stream handler which colours each line by level when writing to a terminal.

    COLORIZE_LOGS=always|never overrides the terminal detection.
    """

    DEFAULT_COLORS = {
        "DEBUG": ["DIM"],
        "INFO": ["GREEN"],
        "WARNING": ["YELLOW"],
        "ERROR": ["RED"],
        "CRITICAL": ["RED", "BOLD"],
    }

    def __init__(self, stream=None, colors=None):
        super().__init__(stream)

        merged = dict(self.DEFAULT_COLORS)
        for level, names in (colors or {}).items():
            merged[level] = [names] if isinstance(names, str) else list(names)
        self.colors = {level: sgr(*names) for level, names in merged.items()}

        colorize = os.getenv("COLORIZE_LOGS", "auto")
        if colorize == "never":
            self.should_colorize = False
        elif colorize == "always":
            self.should_colorize = True
        else:
            isatty = getattr(self.stream, "isatty", None)
            self.should_colorize = bool(isatty and isatty())

    def format(self, record):
        message = super().format(record)
        color = self.colors.get(record.levelname)
        if not self.should_colorize or not color:
            return message

        # Colour every line so tracebacks stay readable when interleaved
        return "\n".join(color + line + sgr("RESET") for line in message.splitlines())
