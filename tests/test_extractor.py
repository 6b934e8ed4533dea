from decimal import Decimal
import unittest

from award_core.extractor import (
    extract_offer,
    extract_offers,
    parse_brl,
    parse_points,
    parse_taxes_cents,
    parse_time,
)
from award_core.models import RawOffer


def _page(**payload) -> RawOffer:
    return RawOffer(provider="smiles.com.br", kind="page", payload=payload)


def _api_flight(economy=None, business=None, taxes=None, **extra) -> RawOffer:
    flight = {
        "departure": {"airportCode": "JFK", "time": "2025-12-20T22:15:00"},
        "arrival": {"airportCode": "GRU", "time": "2025-12-21T09:40:00"},
        "recommendedFare": {
            "economy": {"miles": economy},
            "business": {"miles": business},
            "taxes": taxes,
        },
    }
    flight.update(extra)
    return RawOffer(provider="smiles-api", kind="api", payload=flight)


class FieldParsingTests(unittest.TestCase):
    def test_parse_time_takes_first_match_and_pads(self) -> None:
        self.assertEqual(parse_time("08:00"), "08:00")
        self.assertEqual(parse_time("Saída 8:05 - Chegada 17:30"), "08:05")
        self.assertEqual(parse_time("2025-12-20T22:15:00"), "22:15")

    def test_parse_time_missing_or_invalid_is_empty(self) -> None:
        for value in [None, "", "sem horário", "25:00", "10:75", "123:45", "08:001", 800]:
            with self.subTest(value=value):
                self.assertEqual(parse_time(value), "")

    def test_parse_points_numbers_and_text(self) -> None:
        self.assertEqual(parse_points(25000), 25000)
        self.assertEqual(parse_points(25000.0), 25000)
        self.assertEqual(parse_points("25000 milhas"), 25000)
        self.assertEqual(parse_points("25.000 milhas"), 25000)

    def test_parse_points_absent_values(self) -> None:
        for value in [None, 0, -100, "", "esgotado", "0 milhas", True, float("nan")]:
            with self.subTest(value=value):
                self.assertIsNone(parse_points(value))

    def test_parse_points_ignores_runs_longer_than_five_digits(self) -> None:
        self.assertIsNone(parse_points("123456"))

    def test_parse_brl_brazilian_format(self) -> None:
        self.assertEqual(parse_brl("R$ 800,00"), Decimal("800.00"))
        self.assertEqual(parse_brl("Taxas: R$ 1.234,56"), Decimal("1234.56"))
        self.assertEqual(parse_brl("R$95"), Decimal("95"))

    def test_parse_brl_missing_text_is_zero(self) -> None:
        for value in [None, "", "taxas inclusas"]:
            with self.subTest(value=value):
                self.assertEqual(parse_brl(value), Decimal("0"))

    def test_parse_taxes_cents(self) -> None:
        self.assertEqual(parse_taxes_cents(80000), Decimal("800"))
        self.assertEqual(parse_taxes_cents(None), Decimal("0"))
        self.assertEqual(parse_taxes_cents(-5), Decimal("0"))


class ExtractOfferTests(unittest.TestCase):
    def test_page_record_is_normalised(self) -> None:
        offer = extract_offer(
            _page(economy="25000", business="50000", departure="08:00", arrival="05:30", taxes="R$ 800,00"),
            "jfk",
            "gru",
            "GOL",
        )

        assert offer is not None
        self.assertEqual(offer.airline, "GOL")
        self.assertEqual(offer.origin_code, "JFK")
        self.assertEqual(offer.dest_code, "GRU")
        self.assertEqual(offer.departure_time, "08:00")
        self.assertEqual(offer.arrival_time, "05:30")
        self.assertEqual(offer.economy_points, 25000)
        self.assertEqual(offer.business_points, 50000)
        self.assertEqual(offer.taxes_brl, Decimal("800.00"))

    def test_api_record_uses_nested_fields(self) -> None:
        offer = extract_offer(
            _api_flight(economy=None, business=88000, taxes=45012, airline={"code": "G3"}),
            "NYC",
            "GRU",
            "GOL",
        )

        assert offer is not None
        self.assertEqual(offer.airline, "G3")
        self.assertEqual(offer.origin_code, "JFK")
        self.assertEqual(offer.departure_time, "22:15")
        self.assertEqual(offer.arrival_time, "09:40")
        self.assertIsNone(offer.economy_points)
        self.assertEqual(offer.business_points, 88000)
        self.assertEqual(offer.taxes_brl, Decimal("450.12"))

    def test_records_without_award_space_are_dropped(self) -> None:
        self.assertIsNone(extract_offer(_api_flight(economy=0, business=None), "JFK", "GRU", "GOL"))
        self.assertIsNone(extract_offer(_page(departure="08:00"), "JFK", "GRU", "GOL"))
        self.assertIsNone(extract_offer(RawOffer("x", "unknown", {"economy": 1000}), "JFK", "GRU", "GOL"))

    def test_missing_tax_and_times_degrade_gracefully(self) -> None:
        offer = extract_offer(_page(economy="12000"), "EWR", "GRU", "GOL")

        assert offer is not None
        self.assertEqual(offer.taxes_brl, Decimal("0"))
        self.assertEqual(offer.departure_time, "")
        self.assertEqual(offer.arrival_time, "")

    def test_extract_offers_keeps_order_and_points_invariant(self) -> None:
        records = [
            _page(economy="10000", departure="10:00"),
            _page(economy="0", business="nada"),
            _api_flight(economy=-1, business=70000),
            _page(business="30000", departure="06:00"),
        ]

        offers = extract_offers(records, "LGA", "GRU", "GOL")

        self.assertEqual([offer.departure_time for offer in offers], ["10:00", "22:15", "06:00"])
        for offer in offers:
            points = [p for p in (offer.economy_points, offer.business_points) if p is not None]
            self.assertTrue(points)
            self.assertTrue(all(p > 0 for p in points))


if __name__ == "__main__":
    unittest.main()
