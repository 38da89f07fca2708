"""
Props de base des blocs.
Les clés inconnues sont conservées : les props sont persistées telles quelles.
"""
from pydantic import BaseModel, ConfigDict


class BlockProps(BaseModel):
    """Configuration d'un bloc (classe parente de toutes les props typées)."""
    model_config = ConfigDict(extra="allow")
