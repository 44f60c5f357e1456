"""Tests for salespage/extraction/field_extractor.py"""

import pytest

from salespage.common.constants import (
    DEFAULT_BENEFITS,
    DEFAULT_CALL_TO_ACTION,
    DEFAULT_DESCRIPTION,
    DEFAULT_PRICE,
    DEFAULT_TESTIMONIALS,
    DEFAULT_TITLE,
)
from salespage.extraction.errors import ParseError
from salespage.extraction.field_extractor import FieldExtractorChain, parse_document
from salespage.extraction.strategies import build_field_policies


@pytest.fixture(scope="module")
def chain():
    return FieldExtractorChain()


def extract(chain, html: str) -> dict:
    return chain.extract(parse_document(html))


def page(body: str, head: str = "") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


class TestParseDocument:
    @pytest.mark.parametrize("payload", ["", "   \n  ", None])
    def test_empty_payload_raises(self, payload):
        with pytest.raises(ParseError):
            parse_document(payload)

    def test_plain_text_raises(self):
        with pytest.raises(ParseError, match="not HTML"):
            parse_document('{"price": 10}', url="https://example.com/api")

    def test_parse_error_carries_url(self):
        with pytest.raises(ParseError) as excinfo:
            parse_document("", url="https://example.com/x")
        assert excinfo.value.url == "https://example.com/x"
        assert excinfo.value.kind == "parse"

    def test_unencodable_text_raises(self):
        with pytest.raises(ParseError, match="Could not parse"):
            parse_document("<p>\ud800</p>", url="https://example.com/x")

    def test_fragment_is_accepted(self):
        soup = parse_document("<h1>Only a heading</h1>")
        assert soup.find("h1").get_text() == "Only a heading"

    def test_script_and_style_removed(self):
        soup = parse_document(page("<p>Visible</p><script>var a = 1;</script><style>p{}</style>"))
        assert soup.find("script") is None
        assert soup.find("style") is None


class TestExampleScenario:
    def test_heading_and_price_only(self, chain):
        fields = extract(chain, page('<h1>Super Gadget</h1><div class="price">R$ 49,90 hoje</div>'))
        assert fields["title"] == "Super Gadget"
        assert fields["price"] == "R$ 49,90"
        assert fields["description"] == DEFAULT_DESCRIPTION
        assert fields["benefits"] == DEFAULT_BENEFITS
        assert fields["testimonials"] == DEFAULT_TESTIMONIALS
        assert fields["call_to_action"] == DEFAULT_CALL_TO_ACTION

    def test_empty_body_gives_all_fallbacks(self, chain):
        fields = extract(chain, page(""))
        assert fields == {
            "title": DEFAULT_TITLE,
            "price": DEFAULT_PRICE,
            "description": DEFAULT_DESCRIPTION,
            "benefits": DEFAULT_BENEFITS,
            "testimonials": DEFAULT_TESTIMONIALS,
            "call_to_action": DEFAULT_CALL_TO_ACTION,
        }


class TestFixturePage:
    def test_all_fields(self, chain, sales_page_html):
        fields = extract(chain, sales_page_html)
        assert fields["title"] == "Curso Fotografia Pro"
        assert fields["price"] == "R$ 297,00"
        assert fields["description"] == (
            "Aprenda a fotografar como um profissional, do básico ao avançado, "
            "com aulas práticas. Acesso vitalício e certificado de conclusão."
        )
        assert fields["benefits"] == (
            "Mais de 120 aulas em vídeo",
            "Certificado de conclusão",
            "Suporte direto com o instrutor",
        )
        assert fields["testimonials"] == (
            '"Melhor investimento que fiz na minha carreira de fotógrafa." - Ana',
            '"Consegui meus primeiros clientes em menos de um mês." - João',
        )
        assert fields["call_to_action"] == "Quero me inscrever agora"


class TestTitle:
    def test_heading_beats_document_title(self, chain):
        fields = extract(chain, page("<h1>Heading</h1>", head="<title>Doc Title</title>"))
        assert fields["title"] == "Heading"

    def test_class_before_metadata(self, chain):
        html = page('<div class="product-title">Classy</div>', head="<title>Doc Title</title>")
        assert extract(chain, html)["title"] == "Classy"

    def test_og_title_attribute(self, chain):
        html = page("", head='<meta property="og:title" content="Open Graph Name"><title>Doc</title>')
        assert extract(chain, html)["title"] == "Open Graph Name"

    def test_document_title_last(self, chain):
        assert extract(chain, page("", head="<title>  Doc\n Title </title>"))["title"] == "Doc Title"

    def test_empty_heading_skipped(self, chain):
        html = page("<h1>   </h1><h1>🚀</h1><h1>Second Heading</h1>")
        assert extract(chain, html)["title"] == "Second Heading"

    def test_overlong_heading_rejected(self, chain):
        html = page(f"<h1>{'x' * 300}</h1>", head="<title>Short</title>")
        assert extract(chain, html)["title"] == "Short"


class TestPrice:
    def test_falls_through_to_second_strategy(self, chain):
        html = page('<div class="price">Consulte</div><span class="valor">R$ 10,00</span>')
        assert extract(chain, html)["price"] == "R$ 10,00"

    def test_second_strategy_value_not_fallback(self, chain):
        html = page('<span class="valor">R$ 89,00</span>')
        assert extract(chain, html)["price"] == "R$ 89,00"

    def test_later_node_of_same_strategy(self, chain):
        html = page('<div class="price">Oferta</div><div class="price">R$ 5,50</div>')
        assert extract(chain, html)["price"] == "R$ 5,50"

    def test_substring_class_strategy(self, chain):
        html = page('<span class="product-price-final">R$ 199,90</span>')
        assert extract(chain, html)["price"] == "R$ 199,90"

    def test_itemprop_content(self, chain):
        html = page('<meta itemprop="price" content="79.90">')
        assert extract(chain, html)["price"] == "79.90"

    def test_no_valid_candidate_falls_back(self, chain):
        html = page('<div class="price">Consulte</div><div class="cost">grátis</div>')
        assert extract(chain, html)["price"] == DEFAULT_PRICE


class TestDescription:
    def test_nodes_joined_with_space(self, chain):
        html = page('<div class="description">First block of text.</div>'
                    '<div class="description">Second block of text.</div>')
        assert extract(chain, html)["description"] == "First block of text. Second block of text."

    def test_truncated_to_500(self, chain):
        html = page(f'<div class="description">{"palavra " * 200}</div>')
        description = extract(chain, html)["description"]
        assert len(description) <= 500
        assert not description.endswith(" ")

    def test_trivial_text_skipped(self, chain):
        html = page('<div class="description">Novo!</div><p>Paragraph with enough words to count.</p>')
        assert extract(chain, html)["description"] == "Paragraph with enough words to count."

    def test_meta_description(self, chain):
        html = page("", head='<meta name="description" content="Meta description of the product page.">')
        assert extract(chain, html)["description"] == "Meta description of the product page."

    def test_nested_duplicate_text_dropped(self, chain):
        html = page('<div class="content"><div class="content">Repeated nested content text.</div></div>')
        assert extract(chain, html)["description"] == "Repeated nested content text."


class TestBenefits:
    def test_capped_at_ten(self, chain):
        items = "".join(f"<li>Benefit number {i}</li>" for i in range(15))
        benefits = extract(chain, page(f'<ul class="benefits">{items}</ul>'))["benefits"]
        assert len(benefits) == 10
        assert benefits[0] == "Benefit number 0"

    def test_first_selector_wins(self, chain):
        html = page('<ul class="features"><li>Feature A</li></ul>'
                    '<ul class="benefits"><li>Benefit A</li></ul>')
        assert extract(chain, html)["benefits"] == ("Benefit A",)

    def test_generic_list_fallback_strategy(self, chain):
        html = page("<ul><li>Garantia de 7 dias</li><li>Bônus exclusivo</li></ul>")
        assert extract(chain, html)["benefits"] == ("Garantia de 7 dias", "Bônus exclusivo")

    def test_empty_items_move_to_next_strategy(self, chain):
        html = page('<ul class="benefits"><li> </li></ul><div class="feature">Entrega expressa</div>')
        assert extract(chain, html)["benefits"] == ("Entrega expressa",)


class TestTestimonials:
    def test_short_noise_filtered(self, chain):
        html = page('<div class="review">Top!</div>'
                    '<div class="review">Produto chegou rápido e funciona muito bem.</div>')
        assert extract(chain, html)["testimonials"] == ("Produto chegou rápido e funciona muito bem.",)

    def test_capped_at_five(self, chain):
        reviews = "".join(f'<div class="depoimento">Depoimento número {i} muito satisfeito</div>' for i in range(8))
        assert len(extract(chain, page(reviews))["testimonials"]) == 5

    def test_only_short_items_fall_back(self, chain):
        html = page('<div class="testimonial">Bom</div><div class="testimonial">Ótimo</div>')
        assert extract(chain, html)["testimonials"] == DEFAULT_TESTIMONIALS


class TestCallToAction:
    def test_checkout_link(self, chain):
        html = page('<a href="https://pay.example.com/checkout?id=1">Garantir minha vaga</a>')
        assert extract(chain, html)["call_to_action"] == "Garantir minha vaga"

    def test_purchase_marker_beats_generic_button(self, chain):
        html = page('<button class="btn">Saiba mais</button><a class="comprar" href="#">Comprar já</a>')
        assert extract(chain, html)["call_to_action"] == "Comprar já"

    def test_overlong_candidate_skipped(self, chain):
        html = page(f'<a class="cta" href="#">{"clique " * 20}</a><button>Comprar</button>')
        assert extract(chain, html)["call_to_action"] == "Comprar"


class TestCustomPolicies:
    def test_invalid_selector_is_skipped(self):
        policies = build_field_policies({"title": {"strategies": ["h1[", "h2"]}})
        chain = FieldExtractorChain(policies)
        assert extract(chain, page("<h2>Sub heading</h2>"))["title"] == "Sub heading"

    def test_fallbacks(self):
        chain = FieldExtractorChain(build_field_policies({}))
        assert chain.fallbacks()["call_to_action"] == DEFAULT_CALL_TO_ACTION
