"""Initial schema: users, books, authors, series and tracking

Revision ID: 0001
Revises:
Create Date: 2026-10-17 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _tracking_table(name: str, target_table: str, target_column: str) -> None:
    op.create_table(name,
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column(target_column, sa.Integer(), nullable=False),
        sa.Column('tracked_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('notify_on_release', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint([target_column], [f'{target_table}.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', target_column, name=f'uq_{name}_user_{target_column[:-3]}'),
    )
    op.create_index(op.f(f'ix_{name}_user_id'), name, ['user_id'], unique=False)


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, comment="User's email address (used for login)"),
        sa.Column('password_hash', sa.String(length=255), nullable=False, comment='Bcrypt hashed password'),
        sa.Column('name', sa.String(length=255), nullable=True, comment='Display name'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='When the user registered'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='When the user was last updated'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('authors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False, comment="Author's full name"),
        sa.Column('google_books_author_id', sa.String(length=255), nullable=True, comment='Author identifier at Google Books, when known'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='When the author record was created'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.create_table('series',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False, comment='Series name'),
        sa.Column('description', sa.Text(), nullable=True, comment='Series description'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.create_table('books',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('google_books_id', sa.String(length=255), nullable=True, comment='Google Books volume id'),
        sa.Column('title', sa.String(length=500), nullable=False, comment='Book title'),
        sa.Column('subtitle', sa.String(length=500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('cover_url', sa.String(length=500), nullable=True, comment='Cover thumbnail URL'),
        sa.Column('published_date', sa.Date(), nullable=True, comment='Publication date reported by Google Books'),
        sa.Column('release_date', sa.Date(), nullable=True, comment='Release date shown on the calendar'),
        sa.Column('page_count', sa.Integer(), nullable=True),
        sa.Column('isbn', sa.String(length=50), nullable=True),
        sa.Column('is_released', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('series_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['series_id'], ['series.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_books_google_books_id'), 'books', ['google_books_id'], unique=True)
    op.create_index(op.f('ix_books_release_date'), 'books', ['release_date'], unique=False)

    op.create_table('book_authors',
        sa.Column('book_id', sa.Integer(), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('author_order', sa.Integer(), server_default='1', nullable=False, comment="Position of the author in the book's author list"),
        sa.CheckConstraint('author_order > 0', name='ck_book_authors_order_positive'),
        sa.ForeignKeyConstraint(['author_id'], ['authors.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('book_id', 'author_id')
    )
    op.create_index(op.f('ix_book_authors_book_id'), 'book_authors', ['book_id'], unique=False)
    op.create_index(op.f('ix_book_authors_author_id'), 'book_authors', ['author_id'], unique=False)

    _tracking_table('user_tracked_books', 'books', 'book_id')
    _tracking_table('user_tracked_authors', 'authors', 'author_id')
    _tracking_table('user_tracked_series', 'series', 'series_id')

    op.create_table('community_release_dates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('book_id', sa.Integer(), nullable=False),
        sa.Column('submitted_by', sa.Integer(), nullable=True),
        sa.Column('release_date', sa.Date(), nullable=False),
        sa.Column('source_url', sa.String(length=500), nullable=True),
        sa.Column('votes_up', sa.Integer(), server_default='0', nullable=False),
        sa.Column('votes_down', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_verified', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['submitted_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade() -> None:
    op.drop_table('community_release_dates')
    for name in ('user_tracked_series', 'user_tracked_authors', 'user_tracked_books'):
        op.drop_index(op.f(f'ix_{name}_user_id'), table_name=name)
        op.drop_table(name)
    op.drop_index(op.f('ix_book_authors_author_id'), table_name='book_authors')
    op.drop_index(op.f('ix_book_authors_book_id'), table_name='book_authors')
    op.drop_table('book_authors')
    op.drop_index(op.f('ix_books_release_date'), table_name='books')
    op.drop_index(op.f('ix_books_google_books_id'), table_name='books')
    op.drop_table('books')
    op.drop_table('series')
    op.drop_table('authors')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
