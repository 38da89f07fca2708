"""
Taxonomie d'erreurs du moteur de layout.

MalformedDocument    → document illisible / ROOT absent   (récupéré : page vide)
UnknownBlockKind     → resolvedName non enregistré          (récupéré : nœud ignoré)
UnknownBlockType     → type de bloc non enregistré          (fatal pour serialize)
ContainmentViolation → mutation refusée par une règle de contenance
"""


class PageLayoutError(Exception):
    """Erreur de base du moteur de layout."""


class MalformedDocument(PageLayoutError, ValueError):
    """Document non parsable ou sans structure ROOT exploitable."""


class UnknownBlockKind(PageLayoutError, KeyError):
    """Un nœud référence un resolvedName inconnu du registry."""

    def __init__(self, resolved_name: str):
        super().__init__(resolved_name)
        self.resolved_name = resolved_name

    def __str__(self) -> str:
        return f"Composant inconnu : {self.resolved_name!r}"


class UnknownBlockType(PageLayoutError, ValueError):
    """Un bloc actif référence un type non enregistré — la sauvegarde doit être bloquée."""

    def __init__(self, block_type: str, known: list | None = None):
        self.block_type = block_type
        msg = f"Bloc inconnu : {block_type!r}."
        if known:
            msg += f" Registry : {known}"
        super().__init__(msg)


class ContainmentViolation(PageLayoutError):
    """Un parent refuse les candidats proposés."""

    def __init__(self, parent: str, candidates: list):
        self.parent = parent
        self.candidates = list(candidates)
        super().__init__(f"{parent!r} n'accepte pas {self.candidates}")
