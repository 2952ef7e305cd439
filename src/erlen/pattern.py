import re

from dataclasses import dataclass

PLACEHOLDER_RE = re.compile(r"\[([A-Za-z0-9._-]+)\]")
SEGMENT_PATTERN = "([A-Za-z0-9._-]+)"


def normalize_path(path: str) -> str:
    """Strip a single trailing slash, leaving the root path alone."""
    if len(path) > 1 and path.endswith("/"):
        return path[:-1]
    return path


@dataclass(slots=True, frozen=True)
class Pattern:
    template: str
    regex: re.Pattern[str]
    param_names: tuple[str, ...]

    def match(self, path: str) -> tuple[str, ...] | None:
        m = self.regex.fullmatch(path)
        if m is None:
            return None
        return m.groups()

    def params(self, path: str) -> dict[str, str] | None:
        values = self.match(path)
        if values is None:
            return None
        return dict(zip(self.param_names, values))


def compile_template(template: str) -> Pattern:
    normalized = normalize_path(template)
    param_names: list[str] = []
    regex_parts: list[str] = []
    last = 0

    for m in PLACEHOLDER_RE.finditer(normalized):
        regex_parts.append(re.escape(normalized[last:m.start()]))
        param_names.append(m.group(1))
        regex_parts.append(SEGMENT_PATTERN)
        last = m.end()

    regex_parts.append(re.escape(normalized[last:]))
    regex = re.compile("".join(regex_parts))

    return Pattern(template, regex, tuple(param_names))
