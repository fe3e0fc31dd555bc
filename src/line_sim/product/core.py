import enum


class ProductType(enum.Enum):
    """Product variants moulded on the line. The value is the display label."""

    TYPE_A = "Type A"
    TYPE_B = "Type B"
    TYPE_C = "Type C"
    TYPE_D = "Type D"

    @property
    def base_service_mean(self) -> float:
        """Mean moulding time in minutes before any stage multiplier."""
        return _BASE_SERVICE_MINUTES[self]


_BASE_SERVICE_MINUTES = {
    ProductType.TYPE_A: 10.0,
    ProductType.TYPE_B: 15.0,
    ProductType.TYPE_C: 20.0,
    ProductType.TYPE_D: 12.0,
}

# Draw order for the random product mix
PRODUCT_TYPES: list[ProductType] = [
    ProductType.TYPE_A,
    ProductType.TYPE_B,
    ProductType.TYPE_C,
    ProductType.TYPE_D,
]


class Stage(enum.Enum):
    """
    The three capacity-constrained stages of the line, in routing order.
    Inspection and packaging are automated and run faster than moulding.
    """

    MOULDING = "moulding"
    INSPECTION = "inspection"
    PACKAGING = "packaging"

    @property
    def service_multiplier(self) -> float:
        return _SERVICE_MULTIPLIER[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def next_stage(self) -> "Stage | None":
        """The stage a job is routed to after this one, None after packaging."""
        idx = STAGES.index(self)
        if idx + 1 < len(STAGES):
            return STAGES[idx + 1]
        return None

    @property
    def previous_stage(self) -> "Stage | None":
        idx = STAGES.index(self)
        if idx > 0:
            return STAGES[idx - 1]
        return None

    def service_mean(self, product_type: ProductType) -> float:
        """Mean service time in minutes for a product at this stage."""
        return product_type.base_service_mean * self.service_multiplier


_SERVICE_MULTIPLIER = {
    Stage.MOULDING: 1.0,
    Stage.INSPECTION: 0.8,
    Stage.PACKAGING: 0.6,
}

STAGES: list[Stage] = [Stage.MOULDING, Stage.INSPECTION, Stage.PACKAGING]
