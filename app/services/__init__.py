"""
City Weather Services Package

Core Services:
- credentials: registration, login and profile lookup over a user store
- tokens: signed identity tokens with a fixed lifetime
- weather: gateway to the external weather provider
- city_aggregator: merges stored cities with live weather per request
"""
