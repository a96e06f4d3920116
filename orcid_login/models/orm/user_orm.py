from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Integer, String, UniqueConstraint

from orcid_login.models.orm import Base


class User(Base):
    id = Column(Integer, primary_key=True)
    # for orcid users this is the placeholder address, it identifies the user
    email = Column(String, nullable=False, index=True)
    display_name = Column(String)
    provider_key = Column(String, nullable=False)
    profile = Column(JSON, default=dict)

    created = Column(DateTime, default=datetime.now)
    last_login = Column(DateTime, default=datetime.now)

    __table_args__ = (UniqueConstraint("provider_key", "email"),)

    def __repr__(self):
        return f"<User {self.id}: {self.provider_key}/{self.email}>"
