from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean, Text, ForeignKey, BigInteger, Index
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

class Member(Base):
    """A Discord user seen by the invite tracker."""
    __tablename__ = 'members'
    
    id = Column(BigInteger, primary_key=True, autoincrement=False)  # Discord user id
    name = Column(String(100))
    
    created_at = Column(DateTime, default=func.now())
    
    invite_codes = relationship("InviteCode", back_populates="inviter")
    joins = relationship("Join", back_populates="member")
    leaves = relationship("Leave", back_populates="member")
    custom_invites = relationship("CustomInvite", back_populates="member")
    
    def __repr__(self):
        return f"<Member(id={self.id}, name='{self.name}')>"

class InviteCode(Base):
    __tablename__ = 'invite_codes'
    
    code = Column(String(32), primary_key=True)
    guild_id = Column(BigInteger, nullable=False, index=True)
    channel_id = Column(BigInteger, nullable=True)
    inviter_id = Column(BigInteger, ForeignKey('members.id'), nullable=True)
    uses = Column(Integer, nullable=False, default=0)
    
    created_at = Column(DateTime, default=func.now())
    
    inviter = relationship("Member", back_populates="invite_codes")
    joins = relationship("Join", back_populates="exact_match")
    
    def __repr__(self):
        return f"<InviteCode(code='{self.code}', inviter_id={self.inviter_id}, uses={self.uses})>"

class Join(Base):
    __tablename__ = 'joins'
    
    id = Column(Integer, primary_key=True)
    guild_id = Column(BigInteger, nullable=False)
    member_id = Column(BigInteger, ForeignKey('members.id'), nullable=False)
    # Code the join was attributed to; NULL when the match was ambiguous
    exact_match_code = Column(String(32), ForeignKey('invite_codes.code'), nullable=True)
    
    created_at = Column(DateTime, default=func.now(), nullable=False)
    
    member = relationship("Member", back_populates="joins")
    exact_match = relationship("InviteCode", back_populates="joins")
    
    __table_args__ = (
        Index('ix_joins_guild_member', 'guild_id', 'member_id'),
        Index('ix_joins_guild_created', 'guild_id', 'created_at'),
    )
    
    def __repr__(self):
        return f"<Join(member_id={self.member_id}, code='{self.exact_match_code}')>"

class Leave(Base):
    __tablename__ = 'leaves'
    
    id = Column(Integer, primary_key=True)
    guild_id = Column(BigInteger, nullable=False)
    member_id = Column(BigInteger, ForeignKey('members.id'), nullable=False)
    
    created_at = Column(DateTime, default=func.now(), nullable=False)
    
    member = relationship("Member", back_populates="leaves")
    
    __table_args__ = (Index('ix_leaves_guild_member', 'guild_id', 'member_id'),)
    
    def __repr__(self):
        return f"<Leave(member_id={self.member_id})>"

class CustomInvite(Base):
    """Manual bonus invites, or automation-generated ones when `generated` is set."""
    __tablename__ = 'custom_invites'
    
    id = Column(Integer, primary_key=True)
    guild_id = Column(BigInteger, nullable=False)
    member_id = Column(BigInteger, ForeignKey('members.id'), nullable=False)
    creator_id = Column(BigInteger, nullable=True)
    amount = Column(Integer, nullable=False)
    reason = Column(Text, nullable=True)
    generated = Column(Boolean, nullable=False, default=False)
    
    created_at = Column(DateTime, default=func.now(), nullable=False)
    
    member = relationship("Member", back_populates="custom_invites")
    
    __table_args__ = (Index('ix_custom_invites_guild_member', 'guild_id', 'member_id'),)
    
    def __repr__(self):
        return f"<CustomInvite(member_id={self.member_id}, amount={self.amount}, generated={self.generated})>"
