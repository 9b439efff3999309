# Context of the commit status posted on every pull-request commit. Existing
# branch-protection rules reference it by name, so it must never change.
SIGN_OFF_CONTEXT = "signed-off-by"

DCO_MARKER = "Developer Certificate of Origin"
CONTRIBUTING_FILE = "CONTRIBUTING.md"

PER_PAGE = 10
