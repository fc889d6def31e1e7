"""Review request creation."""

from stackpr.review.gh import (
	ReviewRequest,
	ReviewToolError,
	create_review_request,
	ensure_review_tool,
	find_review_request,
)

__all__ = [
	"ReviewRequest",
	"ReviewToolError",
	"create_review_request",
	"ensure_review_tool",
	"find_review_request",
]
