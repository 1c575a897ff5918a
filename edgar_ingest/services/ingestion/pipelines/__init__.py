from .normalization_pipeline import NormalizationPipeline  # noqa: F401
