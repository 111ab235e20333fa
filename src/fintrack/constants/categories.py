"""
Category identifiers, display metadata and the default budget configuration.

The identifier enum and the display registry are kept apart: aggregation code
only ever sees ``Category`` members, views look up ``CATEGORY_REGISTRY``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    """Closed set of valid transaction categories."""

    AUTO = "Auto"
    COMPRAS = "Compras"
    ASSISTENCIA_MEDICA = "Assistência médica"
    CURSOS = "Cursos"
    ASSINATURAS = "Assinaturas"
    ALIMENTACAO = "Alimentação"
    FAXINA = "Faxina"
    CONTAS = "Contas"
    TRANSPORTE = "Transporte"
    SERVICOS = "Serviços"
    FARMACIA = "Farmácia"
    SUPERMERCADOS = "Supermercados"
    PET = "Pet"
    TABACARIA = "Tabacaria"
    PSICOLOGO = "Psicólogo"
    VIAGENS = "Viagens"
    OUTROS = "Outros"
    FOTOGRAFIA = "Fotografia"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class CategoryInfo:
    """Display hints for a category."""

    name: str
    icon: str
    color: str


CATEGORY_REGISTRY: dict[Category, CategoryInfo] = {
    Category.AUTO: CategoryInfo("Auto", "🚗", "#3B82F6"),
    Category.COMPRAS: CategoryInfo("Compras", "🛍️", "#EC4899"),
    Category.ASSISTENCIA_MEDICA: CategoryInfo("Assistência médica", "🏥", "#EF4444"),
    Category.CURSOS: CategoryInfo("Cursos", "📚", "#8B5CF6"),
    Category.ASSINATURAS: CategoryInfo("Assinaturas", "📺", "#6366F1"),
    Category.ALIMENTACAO: CategoryInfo("Alimentação", "🍽️", "#F97316"),
    Category.FAXINA: CategoryInfo("Faxina", "🧹", "#14B8A6"),
    Category.CONTAS: CategoryInfo("Contas", "🧾", "#64748B"),
    Category.TRANSPORTE: CategoryInfo("Transporte", "🚌", "#0EA5E9"),
    Category.SERVICOS: CategoryInfo("Serviços", "🛠️", "#A855F7"),
    Category.FARMACIA: CategoryInfo("Farmácia", "💊", "#10B981"),
    Category.SUPERMERCADOS: CategoryInfo("Supermercados", "🛒", "#84CC16"),
    Category.PET: CategoryInfo("Pet", "🐾", "#F59E0B"),
    Category.TABACARIA: CategoryInfo("Tabacaria", "🚬", "#78716C"),
    Category.PSICOLOGO: CategoryInfo("Psicólogo", "🧠", "#D946EF"),
    Category.VIAGENS: CategoryInfo("Viagens", "✈️", "#06B6D4"),
    Category.OUTROS: CategoryInfo("Outros", "📦", "#9CA3AF"),
    Category.FOTOGRAFIA: CategoryInfo("Fotografia", "📷", "#F43F5E"),
}

FALLBACK_COLOR = "#8884D8"

# Names offered to the receipt extractor and the entry form
CATEGORY_NAMES: list[str] = [category.value for category in Category]

# Variance panel groupings. Daily spending is reported in percent,
# fixed/large costs in absolute currency.
DAILY_SPENDING_GROUP: tuple[Category, ...] = (
    Category.ALIMENTACAO,
    Category.SUPERMERCADOS,
    Category.TRANSPORTE,
    Category.FARMACIA,
    Category.PET,
)

FIXED_COSTS_GROUP: tuple[Category, ...] = (
    Category.AUTO,
    Category.CURSOS,
    Category.ASSISTENCIA_MEDICA,
    Category.VIAGENS,
    Category.CONTAS,
    Category.ASSINATURAS,
    Category.FAXINA,
    Category.COMPRAS,
    Category.OUTROS,
)

# Monthly limits the app starts with
DEFAULT_BUDGET_LIMITS: dict[Category, float] = {
    Category.ALIMENTACAO: 48,
    Category.SUPERMERCADOS: 11,
    Category.TRANSPORTE: 7,
    Category.FARMACIA: 6,
    Category.PET: 4,
    Category.AUTO: 1351,
    Category.CURSOS: 1000,
    Category.ASSISTENCIA_MEDICA: 0,
    Category.VIAGENS: 0,
    Category.CONTAS: 450,
    Category.ASSINATURAS: 908,
    Category.FAXINA: 890,
    Category.COMPRAS: 930,
    Category.OUTROS: 866,
    Category.SERVICOS: 0,
    Category.TABACARIA: 0,
    Category.PSICOLOGO: 0,
    Category.FOTOGRAFIA: 0,
}


def parse_category(value: str | Category) -> Category:
    """Return the ``Category`` for ``value`` or raise ``ValueError``."""

    if isinstance(value, Category):
        return value
    return Category(value.strip())


def category_color(category: Category) -> str:
    info = CATEGORY_REGISTRY.get(category)
    return info.color if info else FALLBACK_COLOR
