import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from award_core.models import FlightOffer
from award_core.processor import (
    BOTH_CABINS,
    BUSINESS_ONLY,
    ECONOMY_ONLY,
    cabin_category,
    filter_offers,
    group_offers,
    summarise_offers,
)


def _offer(origin="JFK", airline="GOL", dep="08:00", economy=None, business=None) -> FlightOffer:
    return FlightOffer(
        airline=airline,
        origin_code=origin,
        dest_code="GRU",
        departure_time=dep,
        arrival_time="",
        economy_points=economy,
        business_points=business,
    )


class FilterOffersTests(unittest.TestCase):
    def test_cheaper_cabin_decides(self) -> None:
        offers = [
            _offer(economy=25000, business=50000),
            _offer(economy=None, business=45000),
            _offer(economy=60000, business=None),
            _offer(economy=50000, business=90000),
        ]

        kept = filter_offers(offers, 50000)

        self.assertEqual(kept, [offers[0], offers[1], offers[3]])
        for offer in kept:
            self.assertLessEqual(offer.lowest_points or 0, 50000)

    def test_no_ceiling_keeps_everything_in_order(self) -> None:
        offers = [_offer(economy=90000), _offer(business=10000)]
        self.assertEqual(filter_offers(offers, None), offers)

    def test_ceiling_below_every_offer_empties_list(self) -> None:
        offers = [_offer(origin="JFK", economy=30000), _offer(origin="EWR", business=40000)]
        self.assertEqual(filter_offers(offers, 1000), [])

    def test_empty_input(self) -> None:
        self.assertEqual(filter_offers([], 5000), [])


class GroupOffersTests(unittest.TestCase):
    def test_categories_follow_fixed_order(self) -> None:
        offers = [
            _offer(business=70000),
            _offer(economy=20000),
            _offer(economy=20000, business=60000),
        ]

        sections = group_offers(offers)

        self.assertEqual(
            [section.category for section in sections], [BOTH_CABINS, ECONOMY_ONLY, BUSINESS_ONLY]
        )

    def test_business_only_offer_is_never_in_both_cabins(self) -> None:
        offer = _offer(business=70000)

        sections = group_offers([offer])

        self.assertEqual(len(sections), 1)
        self.assertEqual(sections[0].category, BUSINESS_ONLY)
        self.assertEqual(sections[0].buckets[0].offers, [offer])

    def test_buckets_keep_first_seen_order_and_sort_by_time(self) -> None:
        offers = [
            _offer(origin="LGA", airline="GOL", dep="14:00", economy=10000),
            _offer(origin="JFK", airline="GOL", dep="09:00", economy=10000),
            _offer(origin="LGA", airline="GOL", dep="07:30", economy=11000),
            _offer(origin="JFK", airline="AA", dep="06:00", economy=12000),
            _offer(origin="LGA", airline="GOL", dep="", economy=13000),
            _offer(origin="LGA", airline="GOL", dep="07:30", economy=14000),
        ]

        sections = group_offers(offers)

        self.assertEqual(len(sections), 1)
        buckets = sections[0].buckets
        self.assertEqual(
            [(bucket.origin_code, bucket.airline) for bucket in buckets],
            [("LGA", "GOL"), ("JFK", "GOL"), ("JFK", "AA")],
        )
        lga = buckets[0].offers
        self.assertEqual([offer.departure_time for offer in lga], ["", "07:30", "07:30", "14:00"])
        # equal times keep their input order
        self.assertEqual([offer.economy_points for offer in lga[1:3]], [11000, 14000])

    def test_grouping_is_a_partition(self) -> None:
        offers = [
            _offer(origin=origin, dep=f"{hour:02d}:00", economy=economy, business=business)
            for origin, hour, economy, business in [
                ("JFK", 10, 10000, None),
                ("EWR", 9, None, 50000),
                ("JFK", 8, 20000, 60000),
                ("LGA", 7, 30000, None),
                ("EWR", 6, 15000, 55000),
            ]
        ]

        sections = group_offers(offers)

        grouped = [offer for section in sections for bucket in section.buckets for offer in bucket.offers]
        self.assertEqual(len(grouped), len(offers))
        self.assertEqual(set(map(id, grouped)), set(map(id, offers)))
        for section in sections:
            for bucket in section.buckets:
                self.assertTrue(bucket.offers)
                for offer in bucket.offers:
                    self.assertEqual(cabin_category(offer), section.category)
                    self.assertEqual((offer.origin_code, offer.airline), (bucket.origin_code, bucket.airline))
                times = [offer.departure_time for offer in bucket.offers]
                self.assertEqual(times, sorted(times))

    def test_empty_input_has_no_sections(self) -> None:
        self.assertEqual(group_offers([]), [])

    def test_offer_without_points_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            group_offers([_offer()])


class SummaryTests(unittest.TestCase):
    def test_summary_counts_and_origins(self) -> None:
        summary = summarise_offers(
            [_offer(origin="LGA", economy=30000), _offer(origin="JFK", business=20000), _offer(origin="LGA", economy=5000)]
        )
        self.assertEqual(summary, {"count": 3, "min_points": 5000, "origins": ["LGA", "JFK"]})

    def test_summary_of_nothing(self) -> None:
        self.assertEqual(summarise_offers([]), {"count": 0, "min_points": None, "origins": []})


if __name__ == "__main__":
    unittest.main()
