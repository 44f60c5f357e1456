"""
Sales Chat Responder

Answers shopper questions about an extracted sales page.

- KeywordResponder: fixed keyword rules (config/chat_replies.yaml),
  a pure function of (message, ExtractionResult)
- build_prompt: prompt for an external completion service, conditioned
  on the extracted fields
- ChatService: ties the extractor to either of the above
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from ..common.config_loader import load_chat_rules
from ..common.text_utils import normalize
from ..models import ExtractionResult

logger = logging.getLogger(__name__)

Completion = Callable[[str], str]

# Benefits listed inline in a chat reply
_BENEFITS_IN_REPLY = 3


def _template_fields(result: ExtractionResult) -> Dict[str, str]:
    return {
        "title": result.title,
        "price": result.price,
        "description": result.description,
        "benefits": "; ".join(result.benefits[:_BENEFITS_IN_REPLY]),
        "testimonial": result.testimonials[0] if result.testimonials else "",
        "call_to_action": result.call_to_action,
    }


class KeywordResponder:
    """
    Keyword-matched canned replies.

    Rules are checked in order; the first rule with a keyword contained
    in the lowercased message wins. The rule named 'default' answers
    everything else.
    """

    def __init__(self, rules: Optional[List[Dict[str, Any]]] = None):
        """
        Initialize the responder.

        Args:
            rules: Rule dicts (if None, loads config/chat_replies.yaml)

        Raises:
            ValueError: If no 'default' rule is present
        """
        if rules is None:
            rules = load_chat_rules()

        self.rules = [rule for rule in rules if rule.get("name") != "default"]
        defaults = [rule for rule in rules if rule.get("name") == "default"]
        if not defaults:
            raise ValueError("Chat rules must include a 'default' rule")
        self.default_rule = defaults[0]

    def match(self, message: str) -> Dict[str, Any]:
        """Return the rule that answers message."""
        text = normalize(message).lower()
        for rule in self.rules:
            if any(keyword.lower() in text for keyword in rule.get("keywords", [])):
                return rule
        return self.default_rule

    def respond(self, message: str, result: Optional[ExtractionResult] = None) -> str:
        """
        Answer message.

        Uses the rule's product-specific reply when a successful result is
        given, and its generic reply otherwise (no result, or a failed
        extraction whose fields are only fallback literals).
        """
        rule = self.match(message)
        if result is None or result.error is not None:
            return rule["generic"]
        return rule["reply"].format(**_template_fields(result))


def build_prompt(message: str, result: ExtractionResult) -> str:
    """Build a completion prompt grounded in the extracted product data."""
    benefits = "\n".join(f"- {item}" for item in result.benefits)
    testimonials = "\n".join(f"- {item}" for item in result.testimonials)

    return (
        "Você é um assistente de vendas simpático e objetivo. Responda em português, "
        "em no máximo 3 frases, usando apenas as informações do produto abaixo. "
        "Se a informação não estiver disponível, diga isso e convide o cliente a "
        "consultar a página.\n\n"
        f"Produto: {result.title}\n"
        f"Preço: {result.price}\n"
        f"Descrição: {result.description}\n"
        f"Benefícios:\n{benefits}\n"
        f"Depoimentos:\n{testimonials}\n"
        f"Chamada para ação: {result.call_to_action}\n"
        f"Página: {result.final_url}\n\n"
        f"Pergunta do cliente: {normalize(message)}\n"
        "Resposta:"
    )


class ChatService:
    """
    Answers questions about a sales page URL.

    Reuses a cached extraction when one exists, extracts otherwise.
    With a completion callable, replies come from it; if the call fails
    or returns nothing, the keyword reply is used instead.
    """

    def __init__(
        self,
        extractor,
        complete: Optional[Completion] = None,
        responder: Optional[KeywordResponder] = None,
    ):
        self.extractor = extractor
        self.complete = complete
        self.responder = responder if responder is not None else KeywordResponder()

    def answer(self, url: str, message: str) -> str:
        if not normalize(message):
            raise ValueError("Message is required")

        result = self.extractor.lookup_cached(url)
        if result is None:
            result = self.extractor.extract(url)

        if self.complete is None or result.error is not None:
            return self.responder.respond(message, result)

        try:
            reply = (self.complete(build_prompt(message, result)) or "").strip()
        except Exception as e:
            logger.warning("Completion failed, using keyword reply: %s", e)
            return self.responder.respond(message, result)

        if not reply:
            logger.warning("Completion returned nothing, using keyword reply")
            return self.responder.respond(message, result)
        return reply
