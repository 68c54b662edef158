import uuid


class IdGenerator:
    """Generates globally unique identifiers for new entities."""

    def generate(self) -> str:
        return str(uuid.uuid4())


id_generator = IdGenerator()
