"""
Error Types
Every failure the store, the recommendation workflow or the service can report
"""


class FridgeError(Exception):
    """Base exception for FridgeChef errors"""
    default_message = "Something went wrong."

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(FridgeError):
    """Raised when user input (name, expiration date, recipe title) is invalid"""
    default_message = "Invalid input."


class NotFoundError(FridgeError):
    """Raised when an ingredient id is unknown"""
    default_message = "Ingredient not found."


class ConfigurationError(FridgeError):
    """Raised when the AI capability is missing or unconfigured"""
    default_message = (
        "The AI model is not configured. "
        "Please set OPENROUTER_API_KEY in your .env file."
    )


class EmptyStateError(FridgeError):
    """Raised when there are no ingredients to recommend from"""
    default_message = "There are no ingredients yet. Please add some ingredients first."


class NoRecipesError(FridgeError):
    """Raised when the AI returned a well-formed but empty recipe list"""
    default_message = "No recipes found for your ingredients."


class ResponseFormatError(FridgeError):
    """Raised when no JSON array can be located in the AI response"""
    default_message = "Response format error - could not locate JSON in the AI response."


class ParsingError(FridgeError):
    """Raised when the extracted JSON does not match the expected shape"""
    default_message = "Parsing error - the AI response could not be read."


class NoOutputError(FridgeError):
    """Raised when the provider returned no text"""
    default_message = "The AI produced no output."


class TransportError(FridgeError):
    """Raised for network or provider-level failures"""
    default_message = "Could not reach the AI provider."


class RateLimitError(TransportError):
    """Raised when the provider rate limit is hit"""
    default_message = "Rate limited by the AI provider. Please try again shortly."
