"""Constants for the turn pipeline."""

# Number of most recent tool results replayed into the system prompt
RECENT_TOOL_RESULTS = 3

APOLOGY_RESPONSE = "Sorry, I'm having some technical issues. Please hold for a moment."

FAREWELL_RESPONSE = "Thank you for calling! Have a great day and safe travels!"

# Canned replies used when no completion provider is configured
MOCK_RESPONSES = [
    "I'd be happy to help you with that! Let me check what's available.",
    "Sure thing! I can look that up for you right away.",
    "Absolutely! Let me find the best options for you.",
    "Great question! Let me search for that information.",
]

# Substrings that end the call in mock mode
END_CALL_INDICATORS = ["bye", "thank"]

MOCK_FLIGHT_KEYWORD = "flight"
MOCK_FLIGHT_PARAMS = {"origin": "NYC", "destination": "LAX"}
MOCK_TOOL_PROBABILITY = 0.5
