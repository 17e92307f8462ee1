"""initial schema: accounts, staff, sites, institutions, assignments, acts

Revision ID: 7f3c1d2a9b10
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '7f3c1d2a9b10'
down_revision = None
branch_labels = None
depends_on = None


def _enum(name, *values):
    return sa.Enum(*values, name=name, create_constraint=True)


ROLE = _enum('enum_user_role', 'super_admin', 'admin', 'gestor')
ACCOUNT_STATUS = _enum('enum_account_status', 'active', 'inactive', 'suspended')
EMPLOYEE_POSITION = _enum('enum_employee_position', 'teacher', 'principal')
EMPLOYEE_STATUS = _enum('enum_employee_status', 'active', 'inactive', 'suspended')
ACADEMIC_LEVEL = _enum(
    'enum_academic_level',
    'basic_studies', 'high_school', 'professional', 'technologist',
    'licentiate', 'specialization', 'masters', 'doctorate',
)
SITE_STATUS = _enum('enum_site_status', 'active', 'inactive')
SITE_ZONE = _enum('enum_site_zone', 'urban', 'rural')
SHIFT_NAME = _enum('enum_shift_name', 'morning', 'afternoon', 'saturday', 'night')
ASSIGNMENT_STATUS = _enum('enum_assignment_status', 'active', 'ended')
ASSIGNMENT_KIND = _enum('enum_assignment_kind', 'staff', 'principal')

ENUMS = (
    ROLE, ACCOUNT_STATUS, EMPLOYEE_POSITION, EMPLOYEE_STATUS, ACADEMIC_LEVEL,
    SITE_STATUS, SITE_ZONE, SHIFT_NAME, ASSIGNMENT_STATUS, ASSIGNMENT_KIND,
)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _person():
    return [
        sa.Column('document_type', sa.String(length=10), nullable=False),
        sa.Column('document_number', sa.String(length=30), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        *_person(),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('password_hash', sa.String(length=254), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('role', ROLE, nullable=False),
        sa.Column('status', ACCOUNT_STATUS, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.UniqueConstraint('email', name='uq_users_email'),
        sa.UniqueConstraint('document_number', name='uq_users_document_number'),
    )
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), nullable=False),
        *_person(),
        sa.Column('email', sa.String(length=254), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('position', EMPLOYEE_POSITION, nullable=False),
        sa.Column('status', EMPLOYEE_STATUS, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_employees'),
        sa.UniqueConstraint('document_number', name='uq_employees_document_number'),
        sa.UniqueConstraint('email', name='uq_employees_email'),
    )
    op.create_index('ix_employees_position_status', 'employees', ['position', 'status'])

    op.create_table(
        'academic_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('level', ACADEMIC_LEVEL, nullable=False),
        sa.Column('years_experience', sa.Integer(), nullable=True),
        sa.Column('institution', sa.String(length=200), nullable=True),
        sa.Column('degree_title', sa.String(length=200), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['employee_id'], ['employees.id'],
            name='fk_academic_records_employee_id_employees', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_academic_records'),
    )
    op.create_index('ix_academic_records_employee_id', 'academic_records', ['employee_id'])

    op.create_table(
        'employee_comments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=True),
        sa.Column('note', sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['employee_id'], ['employees.id'],
            name='fk_employee_comments_employee_id_employees', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['author_id'], ['users.id'],
            name='fk_employee_comments_author_id_users', ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_employee_comments'),
    )
    op.create_index('ix_employee_comments_employee_id', 'employee_comments', ['employee_id'])

    op.create_table(
        'sites',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('status', SITE_STATUS, nullable=False),
        sa.Column('zone', SITE_ZONE, nullable=False),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('dane_code', sa.String(length=30), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_sites'),
    )
    op.create_index('ix_sites_status_zone', 'sites', ['status', 'zone'])

    op.create_table(
        'shifts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', SHIFT_NAME, nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_shifts'),
        sa.UniqueConstraint('name', name='uq_shifts_name'),
    )

    op.create_table(
        'site_shifts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('site_id', sa.Integer(), nullable=False),
        sa.Column('shift_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['site_id'], ['sites.id'], name='fk_site_shifts_site_id_sites', ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['shift_id'], ['shifts.id'], name='fk_site_shifts_shift_id_shifts', ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_site_shifts'),
        sa.UniqueConstraint('site_id', 'shift_id', name='uq_site_shifts_site_shift'),
    )

    op.create_table(
        'institutions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('principal_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['principal_id'], ['employees.id'],
            name='fk_institutions_principal_id_employees', ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_institutions'),
        sa.UniqueConstraint('name', name='uq_institutions_name'),
    )
    op.create_index('ix_institutions_principal_id', 'institutions', ['principal_id'])

    op.create_table(
        'institution_sites',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('institution_id', sa.Integer(), nullable=False),
        sa.Column('site_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['institution_id'], ['institutions.id'],
            name='fk_institution_sites_institution_id_institutions', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['site_id'], ['sites.id'], name='fk_institution_sites_site_id_sites', ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_institution_sites'),
        sa.UniqueConstraint(
            'institution_id', 'site_id', name='uq_institution_sites_institution_site'
        ),
    )
    op.create_index('ix_institution_sites_site_id', 'institution_sites', ['site_id'])

    op.create_table(
        'site_assignments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('site_id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('status', ASSIGNMENT_STATUS, nullable=False),
        sa.Column('kind', ASSIGNMENT_KIND, nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            'end_date IS NULL OR end_date >= start_date',
            name='ck_site_assignments_end_after_start',
        ),
        sa.ForeignKeyConstraint(
            ['employee_id'], ['employees.id'],
            name='fk_site_assignments_employee_id_employees', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['site_id'], ['sites.id'], name='fk_site_assignments_site_id_sites', ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_site_assignments'),
    )
    op.create_index('ix_site_assignments_employee_id', 'site_assignments', ['employee_id'])
    op.create_index('ix_site_assignments_site_id', 'site_assignments', ['site_id'])
    active_staff = sa.text("status = 'active' AND kind = 'staff'")
    active_principal = sa.text("status = 'active' AND kind = 'principal'")
    op.create_index(
        'uq_site_assignments_active_staff', 'site_assignments', ['employee_id'],
        unique=True, sqlite_where=active_staff, postgresql_where=active_staff,
    )
    op.create_index(
        'uq_site_assignments_active_principal_site', 'site_assignments',
        ['employee_id', 'site_id'],
        unique=True, sqlite_where=active_principal, postgresql_where=active_principal,
    )

    op.create_table(
        'administrative_acts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('sequence', sa.Integer(), nullable=False),
        sa.Column('institution_id', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['institution_id'], ['institutions.id'],
            name='fk_administrative_acts_institution_id_institutions', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_administrative_acts'),
        sa.UniqueConstraint('name', name='uq_administrative_acts_name'),
    )
    op.create_index(
        'ix_administrative_acts_institution_id', 'administrative_acts', ['institution_id']
    )


def downgrade():
    op.drop_table('administrative_acts')
    op.drop_table('site_assignments')
    op.drop_table('institution_sites')
    op.drop_table('institutions')
    op.drop_table('site_shifts')
    op.drop_table('shifts')
    op.drop_table('sites')
    op.drop_table('employee_comments')
    op.drop_table('academic_records')
    op.drop_table('employees')
    op.drop_table('users')

    bind = op.get_bind()
    for enum in ENUMS:
        enum.drop(bind, checkfirst=True)
