from skycast.models.state.state import OrchestratorState

__all__ = ["OrchestratorState"]
