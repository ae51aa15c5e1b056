"""Interaction sub-package — hit-testing, selection state and tap dispatch."""
from activetext.interaction.dispatcher import TapDispatcher
from activetext.interaction.element_index import ElementIndex
from activetext.interaction.selection import SelectionPhase, SelectionState

__all__ = ["ElementIndex", "SelectionPhase", "SelectionState", "TapDispatcher"]
