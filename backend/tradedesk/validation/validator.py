from __future__ import annotations

from tradedesk.schemas.dashboard import ModelConfig, ValidationIssue, ValidationResult

MODEL_PARAMETERS: dict[str, dict[str, int]] = {
    "ARMA": {"p": 1, "q": 1},
    "ARIMA": {"p": 1, "d": 1, "q": 1},
    "SARIMA": {"p": 1, "d": 1, "q": 1, "P": 1, "D": 1, "Q": 1, "s": 12},
    "GARCH": {"p": 1, "q": 1, "o": 1, "m": 1},
}


def _result(issues: list[ValidationIssue]) -> ValidationResult:
    status = "ok"
    if any(issue.level == "fail" for issue in issues):
        status = "fail"
    elif issues:
        status = "warn"
    return ValidationResult(status=status, issues=issues)


def validate_model_config(config: ModelConfig) -> ValidationResult:
    issues: list[ValidationIssue] = []

    expected = MODEL_PARAMETERS.get(config.type)
    if expected is None:
        issues.append(
            ValidationIssue(
                field="model.type",
                level="fail",
                message=f"Unknown model type: {config.type}",
            )
        )
        return _result(issues)

    unknown = sorted(set(config.parameters) - set(expected))
    if unknown:
        issues.append(
            ValidationIssue(
                field="model.parameters",
                level="fail",
                message=f"{config.type} does not take: " + ", ".join(unknown),
            )
        )

    missing = sorted(set(expected) - set(config.parameters))
    if missing:
        issues.append(
            ValidationIssue(
                field="model.parameters",
                level="warn",
                message="Missing parameters default to 1: " + ", ".join(missing),
            )
        )

    for key, value in config.parameters.items():
        if value < 0:
            issues.append(
                ValidationIssue(
                    field=f"model.parameters.{key}",
                    level="fail",
                    message=f"{key} must not be negative.",
                )
            )

    if config.type == "SARIMA" and config.parameters.get("s", 12) < 2:
        issues.append(
            ValidationIssue(
                field="model.parameters.s",
                level="warn",
                message="Seasonal period below 2 has no seasonal effect.",
            )
        )

    return _result(issues)
