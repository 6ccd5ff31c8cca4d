"""create companies table

Revision ID: 0001_create_companies
Revises:
Create Date: 2026-10-19 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_create_companies"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("cnpj", sa.String(length=14), nullable=False),
        sa.Column("razao_social", sa.Text(), nullable=True),
        sa.Column("nome_fantasia", sa.Text(), nullable=True),
        sa.Column("situacao_cadastral", sa.Text(), nullable=True),
        sa.Column("data_situacao_cadastral", sa.Date(), nullable=True),
        sa.Column("matriz_filial", sa.Text(), nullable=True),
        sa.Column("data_inicio_atividade", sa.Date(), nullable=True),
        sa.Column("cnae_principal_code", sa.Text(), nullable=True),
        sa.Column("cnaes_secundarios", sa.Text(), nullable=True),
        sa.Column("cnaes_secundarios_count", sa.Integer(), nullable=True),
        sa.Column("natureza_juridica", sa.Text(), nullable=True),
        sa.Column("logradouro", sa.Text(), nullable=True),
        sa.Column("numero", sa.Text(), nullable=True),
        sa.Column("complemento", sa.Text(), nullable=True),
        sa.Column("bairro", sa.Text(), nullable=True),
        sa.Column("cep", sa.String(length=8), nullable=True),
        sa.Column("uf", sa.String(length=2), nullable=True),
        sa.Column("municipio", sa.Text(), nullable=True),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("telefones", sa.Text(), nullable=True),
        sa.Column("capital_social", sa.Numeric(18, 2), nullable=True),
        sa.Column("porte_empresa", sa.Text(), nullable=True),
        sa.Column("opcao_simples", sa.Text(), nullable=True),
        sa.Column("data_opcao_simples", sa.Date(), nullable=True),
        sa.Column("opcao_mei", sa.Text(), nullable=True),
        sa.Column("data_opcao_mei", sa.Date(), nullable=True),
        sa.Column("qsa", sa.Text(), nullable=True),
        sa.Column("raw", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("cnpj"),
    )

    # Listing is always ordered by most recent update
    op.create_index("ix_companies_updated_at", "companies", ["updated_at"])


def downgrade() -> None:
    op.drop_index("ix_companies_updated_at", table_name="companies")
    op.drop_table("companies")
