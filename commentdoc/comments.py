from __future__ import annotations

from typing import List, Optional

# The marker and the single space after it ("# ") are cut from every line.
COMMENT_PREFIX = "# "


def normalize(comment_lines: Optional[List[str]]) -> str:
	"""
	Join a documentation comment into one description string.

	Each line loses its fixed-width "# " prefix and the rest is concatenated
	as is, so "# first" / "# second" becomes "firstsecond".
	"""
	if not comment_lines:
		return ""
	return "".join(line[len(COMMENT_PREFIX):] for line in comment_lines)
