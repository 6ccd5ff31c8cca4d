from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from companies_api.database import Base


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cnpj: Mapped[str] = mapped_column(String(14), unique=True, nullable=False)
    razao_social: Mapped[str | None] = mapped_column(Text, nullable=True)
    nome_fantasia: Mapped[str | None] = mapped_column(Text, nullable=True)
    situacao_cadastral: Mapped[str | None] = mapped_column(Text, nullable=True)
    data_situacao_cadastral: Mapped[date | None] = mapped_column(Date, nullable=True)
    matriz_filial: Mapped[str | None] = mapped_column(Text, nullable=True)
    data_inicio_atividade: Mapped[date | None] = mapped_column(Date, nullable=True)
    cnae_principal_code: Mapped[str | None] = mapped_column(Text, nullable=True)
    cnaes_secundarios: Mapped[str | None] = mapped_column(Text, nullable=True)
    cnaes_secundarios_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    natureza_juridica: Mapped[str | None] = mapped_column(Text, nullable=True)
    logradouro: Mapped[str | None] = mapped_column(Text, nullable=True)
    numero: Mapped[str | None] = mapped_column(Text, nullable=True)
    complemento: Mapped[str | None] = mapped_column(Text, nullable=True)
    bairro: Mapped[str | None] = mapped_column(Text, nullable=True)
    cep: Mapped[str | None] = mapped_column(String(8), nullable=True)
    uf: Mapped[str | None] = mapped_column(String(2), nullable=True)
    municipio: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    telefones: Mapped[str | None] = mapped_column(Text, nullable=True)
    capital_social: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    porte_empresa: Mapped[str | None] = mapped_column(Text, nullable=True)
    opcao_simples: Mapped[str | None] = mapped_column(Text, nullable=True)
    data_opcao_simples: Mapped[date | None] = mapped_column(Date, nullable=True)
    opcao_mei: Mapped[str | None] = mapped_column(Text, nullable=True)
    data_opcao_mei: Mapped[date | None] = mapped_column(Date, nullable=True)
    qsa: Mapped[str | None] = mapped_column(Text, nullable=True)
    raw: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
