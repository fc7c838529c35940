"""create_profiles_and_notes

Revision ID: 4c1d7e2a9b30
Revises:
Create Date: 2026-03-09 10:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4c1d7e2a9b30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the profiles and notes tables with their RLS policies.

    The API connects with a service account that bypasses RLS; the policies
    apply to direct Supabase client connections. Owners may only rename
    themselves or drop to the Free plan; role, status and email changes are
    reserved for admins. A self-inserted profile must carry the sign-up
    defaults unless its email matches the ``app.console_admin_email``
    database setting, in which case it may bootstrap as admin.
    """
    op.create_table(
        "profiles",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("subscription", sa.String(length=20), nullable=False, server_default="Free"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True, server_default=sa.text("NOW()")),
        sa.Column("updated_at", sa.DateTime(), nullable=True, server_default=sa.text("NOW()")),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("role IN ('user', 'admin')", name="ck_profiles_role"),
        sa.CheckConstraint(
            "subscription IN ('Free', 'Premium', 'Admin')",
            name="ck_profiles_subscription",
        ),
        sa.CheckConstraint(
            "status IN ('active', 'banned', 'disabled')",
            name="ck_profiles_status",
        ),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"])

    # user_id has no foreign key: notes survive profile deletion
    op.create_table(
        "notes",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True, server_default=sa.text("NOW()")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notes_user_id_created_at", "notes", ["user_id", "created_at"])

    for table in ["profiles", "notes"]:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # SECURITY DEFINER so the admin check does not recurse into profiles RLS
    op.execute("""
        CREATE OR REPLACE FUNCTION is_console_admin(uid UUID)
        RETURNS BOOLEAN
        LANGUAGE sql
        SECURITY DEFINER
        STABLE
        SET search_path = public
        AS $$
            SELECT EXISTS (SELECT 1 FROM profiles WHERE id = uid AND role = 'admin');
        $$;
    """)

    # Compares against the stored row: STABLE functions see the statement's
    # snapshot, not the row being written
    op.execute("""
        CREATE OR REPLACE FUNCTION profile_owner_update_allowed(
            uid UUID, new_email TEXT, new_role TEXT, new_status TEXT, new_subscription TEXT
        )
        RETURNS BOOLEAN
        LANGUAGE sql
        SECURITY DEFINER
        STABLE
        SET search_path = public
        AS $$
            SELECT EXISTS (
                SELECT 1 FROM profiles p
                WHERE p.id = uid
                  AND p.email = new_email
                  AND p.role = new_role
                  AND p.status = new_status
                  AND (new_subscription = p.subscription OR new_subscription = 'Free')
            );
        $$;
    """)

    # profiles: owners read and rename their own row, admins everything
    op.execute("""
        CREATE POLICY profiles_select ON profiles
            FOR SELECT USING (
                id = (SELECT auth.uid()) OR is_console_admin((SELECT auth.uid()))
            );
    """)
    op.execute("""
        CREATE POLICY profiles_insert ON profiles
            FOR INSERT WITH CHECK (
                id = (SELECT auth.uid())
                AND email = (SELECT auth.jwt() ->> 'email')
                AND status = 'active'
                AND (
                    (role = 'user' AND subscription = 'Free')
                    OR (
                        role = 'admin'
                        AND subscription = 'Admin'
                        AND email = current_setting('app.console_admin_email', true)
                    )
                )
            );
    """)
    op.execute("""
        CREATE POLICY profiles_update_own ON profiles
            FOR UPDATE
            USING (id = (SELECT auth.uid()))
            WITH CHECK (
                id = (SELECT auth.uid())
                AND profile_owner_update_allowed(id, email, role, status, subscription)
            );
    """)
    op.execute("""
        CREATE POLICY profiles_update_admin ON profiles
            FOR UPDATE
            USING (is_console_admin((SELECT auth.uid())))
            WITH CHECK (is_console_admin((SELECT auth.uid())));
    """)
    op.execute("""
        CREATE POLICY profiles_delete ON profiles
            FOR DELETE USING (
                id = (SELECT auth.uid()) OR is_console_admin((SELECT auth.uid()))
            );
    """)

    # notes: owners read their own, admins read all
    op.execute("""
        CREATE POLICY notes_select ON notes
            FOR SELECT USING (
                user_id = (SELECT auth.uid()) OR is_console_admin((SELECT auth.uid()))
            );
    """)


def downgrade() -> None:
    """Drop policies, helper function and tables."""
    op.execute("DROP POLICY IF EXISTS notes_select ON notes;")
    for policy in [
        "profiles_select",
        "profiles_insert",
        "profiles_update_own",
        "profiles_update_admin",
        "profiles_delete",
    ]:
        op.execute(f"DROP POLICY IF EXISTS {policy} ON profiles;")
    op.execute("DROP FUNCTION IF EXISTS profile_owner_update_allowed(UUID, TEXT, TEXT, TEXT, TEXT);")
    op.execute("DROP FUNCTION IF EXISTS is_console_admin(UUID);")

    op.drop_index("ix_notes_user_id_created_at", table_name="notes")
    op.drop_table("notes")
    op.drop_index("ix_profiles_email", table_name="profiles")
    op.drop_table("profiles")
