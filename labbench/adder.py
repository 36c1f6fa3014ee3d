"""A minimal CGI program that adds two numbers from QUERY_STRING."""

from __future__ import annotations

import os
import re
import sys

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def atoi(text: str) -> int:
    """Parse a leading decimal integer as C's atoi does; 0 if there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_query(query: str | None) -> tuple[int, int]:
    """Return the two numbers in a query of the form ``a&b``."""
    if query is None:
        return 0, 0
    first, sep, second = query.partition("&")
    if not sep:
        raise ValueError(f"query string has no '&': {query!r}")
    return atoi(first), atoi(second)


def render(query: str | None) -> str:
    """Build the CGI response, headers and body, for a query string."""
    n1, n2 = parse_query(query)
    content = (
        "Welcome to add.com: "
        "THE Internet addition portal.\r\n<p>"
        f"The answer is: {n1} + {n2} = {n1 + n2}\r\n<p>"
        "Thanks for visiting!\r\n"
    )
    return (
        "Connection: close\r\n"
        f"Content-length: {len(content.encode())}\r\n"
        "Content-type: text/html\r\n\r\n"
        f"{content}"
    )


def main(argv: list[str] | None = None) -> int:
    """Write the response for the QUERY_STRING in the environment."""
    sys.stdout.write(render(os.environ.get("QUERY_STRING")))
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())