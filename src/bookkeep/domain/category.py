"""Transaction category domain service."""

from typing import Optional

from bookkeep.database.base import Database
from bookkeep.domain.entities import TransactionCategory, TransactionType
from bookkeep.domain.errors import ConflictError, ValidationError

DEFAULT_CATEGORIES: list[tuple[int, str, TransactionType]] = [
    (1, "Venta de productos", TransactionType.INCOME),
    (2, "Venta de servicios", TransactionType.INCOME),
    (3, "Delivery", TransactionType.INCOME),
    (4, "Ingresos por comisiones", TransactionType.INCOME),
    (5, "Ingresos extraordinarios", TransactionType.INCOME),
    (6, "Devoluciones de gastos", TransactionType.INCOME),
    (7, "Ingresos financieros (intereses)", TransactionType.INCOME),
    (8, "Compra de mercadería", TransactionType.EXPENSE),
    (9, "Servicios básicos: Luz", TransactionType.EXPENSE),
    (10, "Servicios básicos: Agua", TransactionType.EXPENSE),
    (11, "Internet y telefonía", TransactionType.EXPENSE),
    (12, "Alquiler local/oficina", TransactionType.EXPENSE),
    (13, "Sueldos y salarios", TransactionType.EXPENSE),
    (14, "Honorarios profesionales", TransactionType.EXPENSE),
    (15, "Publicidad y marketing", TransactionType.EXPENSE),
    (16, "Transporte y movilidad", TransactionType.EXPENSE),
    (17, "Gastos bancarios", TransactionType.EXPENSE),
    (18, "Impuestos y tributos", TransactionType.EXPENSE),
    (19, "Mantenimiento", TransactionType.EXPENSE),
    (20, "Equipos y suministros", TransactionType.EXPENSE),
    (21, "Papelería y útiles", TransactionType.EXPENSE),
    (22, "Seguros", TransactionType.EXPENSE),
    (23, "Capacitación", TransactionType.EXPENSE),
    (24, "Otros gastos operativos", TransactionType.EXPENSE),
]


class CategoryService:
    """Service for managing income and expense categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self, name: str, type: str | TransactionType, category_id: Optional[int] = None
    ) -> int:
        """Create a category.

        Args:
            name: Category name
            type: "income" or "expense"
            category_id: Optional explicit ID (mapping rules are keyed by ID)

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty or the type is not income/expense
            ConflictError: If the explicit ID is already taken
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required", field="name")
        try:
            category_type = TransactionType(type)
        except ValueError:
            category_type = None
        if category_type not in (TransactionType.INCOME, TransactionType.EXPENSE):
            raise ValidationError(
                f"Category type must be income or expense, got '{type}'", field="type"
            )
        if category_id is not None and self.db.get_category(category_id) is not None:
            raise ConflictError(f"Category {category_id} already exists")
        return self.db.create_category(
            name=name, type=category_type.value, category_id=category_id
        )

    def get_category(self, category_id: int) -> Optional[TransactionCategory]:
        """Get category by ID."""
        return self.db.get_category(category_id)

    def list_categories(
        self, type: Optional[str | TransactionType] = None
    ) -> list[TransactionCategory]:
        """List categories, optionally only income or only expense ones."""
        return self.db.list_categories(type=TransactionType(type).value if type else None)

    def seed_defaults(self) -> int:
        """Insert the default categories whose IDs are free.

        Returns:
            Number of categories inserted
        """
        created = 0
        with self.db.atomic("seed categories"):
            for category_id, name, category_type in DEFAULT_CATEGORIES:
                if self.db.get_category(category_id) is None:
                    self.db.create_category(
                        name=name, type=category_type.value, category_id=category_id
                    )
                    created += 1
        return created
