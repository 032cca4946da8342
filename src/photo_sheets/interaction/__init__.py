"""Selection and drag state machine for crop editing."""

from .controller import InteractionController, InteractionState, DragSession, PRIMARY_BUTTON

__all__ = ["InteractionController", "InteractionState", "DragSession", "PRIMARY_BUTTON"]
