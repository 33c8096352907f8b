from commentdoc.comments import normalize


def test_single_line_manual_comment():
	s = normalize(["# This field is a string with a manual comment"])
	assert s == "This field is a string with a manual comment"


def test_lines_are_joined_without_separator():
	assert normalize(["# first line", "# second line"]) == "first linesecond line"


def test_absent_comment_is_empty():
	assert normalize(None) == ""
	assert normalize([]) == ""


def test_prefix_is_fixed_width():
	# Only "# " is cut, extra indentation stays.
	assert normalize(["#   indented"]) == "  indented"
