"""User directory service for the admin surface."""

import math
from datetime import datetime, timedelta

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.user import User

RECENT_SIGNUP_DAYS = 7


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class UserDirectoryService:
    """Handles paginated user listing and search."""

    def list_users(self, db: Session, page: int = 1, limit: int = 10, search: str | None = None) -> dict:
        """List users newest first, optionally filtered by a case-insensitive search term."""
        page = max(page, 1)
        limit = max(limit, 1)

        query = db.query(User)
        if search:
            pattern = f"%{_escape_like(search.strip())}%"
            query = query.filter(
                or_(
                    User.email.ilike(pattern, escape="\\"),
                    User.first_name.ilike(pattern, escape="\\"),
                    User.last_name.ilike(pattern, escape="\\"),
                    User.mobile.ilike(pattern, escape="\\"),
                )
            )

        total = query.count()
        users = query.order_by(User.created_at.desc(), User.id.desc()).offset((page - 1) * limit).limit(limit).all()

        since = datetime.utcnow() - timedelta(days=RECENT_SIGNUP_DAYS)
        recent_signups = db.query(User).filter(User.created_at >= since).count()

        return {
            "users": users,
            "total_users": total,
            "recent_signups": recent_signups,
            "current_page": page,
            "total_pages": math.ceil(total / limit),
        }


_user_directory_service: UserDirectoryService | None = None


def get_user_directory_service() -> UserDirectoryService:
    """Get singleton user directory service instance."""
    global _user_directory_service
    if _user_directory_service is None:
        _user_directory_service = UserDirectoryService()
    return _user_directory_service
