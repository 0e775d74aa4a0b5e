"""Initial schema - All tables

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-01 00:00:00.000000

Creates the index run tables, the news table and the altcoin season snapshot.
Based on the SQLAlchemy models defined in database/models/.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    # ==================================================
    # FEAR & GREED INDEX
    # ==================================================

    op.create_table(
        'fear_greed_index',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('score', sa.Float, nullable=False),
        sa.Column('label', sa.String(50), nullable=False),
        sa.Column('reason', sa.Text, nullable=True),
        sa.Column('btc_price', sa.Float, nullable=True),
        sa.Column('btc_24h_change', sa.Float, nullable=True),
        sa.Column('btc_volume', sa.Float, nullable=True),
        sa.Column('headlines', sa.JSON, nullable=True),
        sa.Column('factors', sa.JSON, nullable=True),
        sa.Column('token_scores', sa.JSON, nullable=True),
        sa.Column('token_prices', sa.JSON, nullable=True),
        sa.Column('factor_snapshot', sa.JSON, nullable=True),
        _created_at(),
    )

    with op.batch_alter_table('fear_greed_index') as batch_op:
        batch_op.create_index('ix_fear_greed_index_created_at', ['created_at'])

    # ==================================================
    # ALTCOIN SEASON SCORE
    # ==================================================

    op.create_table(
        'altcoin_season_score',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('score', sa.Float, nullable=False),
        sa.Column('label', sa.String(50), nullable=False),
        sa.Column('reason', sa.Text, nullable=True),
        sa.Column('total_market_cap', sa.Float, nullable=True),
        sa.Column('altcoin_market_cap', sa.Float, nullable=True),
        sa.Column('btc_dominance', sa.Float, nullable=True),
        sa.Column('headlines', sa.JSON, nullable=True),
        sa.Column('factors', sa.JSON, nullable=True),
        sa.Column('factor_snapshot', sa.JSON, nullable=True),
        _created_at(),
    )

    with op.batch_alter_table('altcoin_season_score') as batch_op:
        batch_op.create_index('ix_altcoin_season_score_created_at', ['created_at'])

    # ==================================================
    # NEWS
    # ==================================================

    op.create_table(
        'news',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('site_name', sa.String(100), nullable=False),
        sa.Column('category', sa.String(30), nullable=False),
        sa.Column('title', sa.Text, nullable=False),
        sa.Column('link', sa.String(1000), nullable=False, unique=True),
        _created_at(),
    )

    with op.batch_alter_table('news') as batch_op:
        batch_op.create_index('ix_news_site_name', ['site_name'])
        batch_op.create_index('ix_news_category', ['category'])
        batch_op.create_index('ix_news_created_at', ['created_at'])

    # ==================================================
    # ALTCOIN SEASON SNAPSHOT
    # ==================================================

    op.create_table(
        'altcoin_season',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('ticker', sa.String(30), nullable=False),
        sa.Column('name', sa.String(200), nullable=True),
        sa.Column('logo_url', sa.Text, nullable=True),
        sa.Column('coingecko_id', sa.String(200), nullable=True),
        sa.Column('performance', sa.Float, nullable=False),
        sa.Column('direction', sa.String(20), nullable=False),
        sa.Column('rank', sa.Integer, nullable=False),
        sa.Column('price', sa.Float, nullable=True),
        sa.Column('price_change_24h', sa.Float, nullable=True),
        sa.Column('index_score', sa.Integer, nullable=True),
        sa.Column('index_label', sa.String(50), nullable=True),
        sa.Column('scraped_at', sa.DateTime(timezone=True), nullable=False),
    )

    with op.batch_alter_table('altcoin_season') as batch_op:
        batch_op.create_index('ix_altcoin_season_ticker', ['ticker'])


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table('altcoin_season')
    op.drop_table('news')
    op.drop_table('altcoin_season_score')
    op.drop_table('fear_greed_index')
