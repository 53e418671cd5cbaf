"""TaskHub — project and task tracking with role-based access control.

Users register and log in for a signed bearer token. Every protected
operation is gated by the token, a three-tier role hierarchy
(employee < manager < admin) and, for task edits, assignee ownership.
"""

__version__ = "0.1.0"
