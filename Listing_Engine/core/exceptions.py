"""
Error taxonomy.

    ExtractionFailure      — bad / unreachable source, unparseable input, no title.
                             Aborts the whole generation cycle.
    GatewayError           — the AI call itself failed (network, auth, quota,
                             unknown provider, missing key or package).
    GenerationFormatError  — the AI call succeeded but returned an unusable shape.

GatewayError and GenerationFormatError abort only the operation that raised
them. Nothing is retried.
"""


class ListingEngineError(Exception):
    """Base class for all engine errors. str(exc) is user-facing."""


class ExtractionFailure(ListingEngineError):
    pass


class GatewayError(ListingEngineError):
    pass


class GenerationFormatError(ListingEngineError):
    pass
