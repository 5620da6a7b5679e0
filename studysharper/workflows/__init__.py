from studysharper.workflows.card_edit import CardEditDialog, DialogState
from studysharper.workflows.set_creation import DraftCard, SetCreationState, SetCreationWorkflow

__all__ = ["CardEditDialog", "DialogState", "DraftCard", "SetCreationState", "SetCreationWorkflow"]
