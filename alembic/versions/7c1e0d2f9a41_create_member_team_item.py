"""create_member_team_item

Revision ID: 7c1e0d2f9a41
Revises:
Create Date: 2026-10-19 10:00:00.000000

회원/팀/아이템 테이블 생성.
Create member, team and item tables with auditing columns.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7c1e0d2f9a41'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLite에서는 INTEGER PRIMARY KEY만 자동 증가 — autoincrement only on INTEGER PK in SQLite
_ID = sa.BigInteger().with_variant(sa.Integer(), 'sqlite')


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column('created_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_modified_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(255), nullable=True),
        sa.Column('last_modified_by', sa.String(255), nullable=True),
    ]


def upgrade() -> None:
    # team — 팀 (member.team_id의 참조 대상)
    op.create_table(
        'team',
        sa.Column('team_id', _ID, primary_key=True),
        sa.Column('name', sa.String(255), nullable=True),
        *_audit_columns(),
    )

    # member — 회원 (many-to-one to team)
    op.create_table(
        'member',
        sa.Column('member_id', _ID, primary_key=True),
        sa.Column('username', sa.String(255), nullable=True),
        sa.Column('age', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('team_id', _ID, sa.ForeignKey('team.team_id'), nullable=True),
        *_audit_columns(),
    )
    op.create_index('ix_member_team_id', 'member', ['team_id'])

    # item — 직접 할당한 문자열 ID (Application-assigned string id)
    op.create_table(
        'item',
        sa.Column('id', sa.String(255), primary_key=True),
        sa.Column('created_date', sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    op.drop_table('item')
    op.drop_index('ix_member_team_id', table_name='member')
    op.drop_table('member')
    op.drop_table('team')
