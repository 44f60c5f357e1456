"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# Cache lifetime for extraction results
CACHE_TTL_MINUTES = 30

# Network fetch bound (seconds)
FETCH_TIMEOUT_SECONDS = 30.0

# Hard caps on extracted content
MAX_BENEFITS = 10
MAX_TESTIMONIALS = 5
MAX_DESCRIPTION_LENGTH = 500

# Fallback literals used when no extraction strategy yields a value
DEFAULT_TITLE = "Produto"
DEFAULT_PRICE = "Consulte o preço"
DEFAULT_DESCRIPTION = "Produto de qualidade"
DEFAULT_BENEFITS = ("Produto de qualidade", "Entrega rápida")
DEFAULT_TESTIMONIALS = ("Produto excelente! Recomendo a todos.",)
DEFAULT_CALL_TO_ACTION = "Comprar Agora"

# Description shown when the page could not be fetched or parsed
FAILURE_DESCRIPTION = (
    "Não foi possível extrair os dados automaticamente. "
    "Por favor, verifique a URL."
)
