from __future__ import annotations

from tradedesk.schemas.dashboard import ModelConfig, ModelType
from tradedesk.validation.validator import MODEL_PARAMETERS

MODEL_TYPES: list[ModelType] = [
    ModelType(value="ARMA", label="ARMA", description="AutoRegressive Moving Average"),
    ModelType(value="ARIMA", label="ARIMA", description="AutoRegressive Integrated MA"),
    ModelType(value="SARIMA", label="SARIMA", description="Seasonal ARIMA"),
    ModelType(value="GARCH", label="GARCH", description="Generalized ARCH"),
]


def default_config(model_type: str = "ARIMA") -> ModelConfig:
    return ModelConfig(type=model_type, parameters=dict(MODEL_PARAMETERS[model_type]))


def apply_change(current: ModelConfig, model_type: str, parameters: dict[str, int] | None) -> ModelConfig:
    """Switching model type resets the parameters to that type's defaults."""
    if model_type != current.type:
        if model_type not in MODEL_PARAMETERS:
            return ModelConfig(type=model_type, parameters=dict(parameters or {}))
        config = default_config(model_type)
    else:
        config = current.model_copy(deep=True)
    if parameters:
        config.parameters.update(parameters)
    return config
