from django.test import SimpleTestCase
from django.http import QueryDict

from complaints.filters import apply_complaint_filters, sort_complaints, summarize_by_status
from complaints.records import Citizen, Complaint, Status


def make(complaint_id, name="", escalated=False, severity="Medium", created_at="", **kwargs):
    return Complaint(
        id=complaint_id,
        citizen=Citizen(name=name),
        escalated=escalated,
        severity=severity,
        created_at=created_at,
        **kwargs,
    )


class FilterTests(SimpleTestCase):
    def setUp(self):
        self.complaints = [
            make("CMP-2024-000001", name="Asha Verma", status=Status.VERIFIED, category="Drainage", ward="W1"),
            make("CMP-2024-000002", name="Ravi Kumar", status=Status.REJECTED, category="Road Damage", ward="W2"),
            make("CMP-2024-000003", name="", status=Status.VERIFIED, category="Drainage", ward="W2"),
        ]

    def ids(self, complaints):
        return [complaint.id for complaint in complaints]

    def test_search_matches_id_and_name_case_insensitively(self):
        self.assertEqual(self.ids(apply_complaint_filters(self.complaints, {"q": "asha"})), ["CMP-2024-000001"])
        self.assertEqual(self.ids(apply_complaint_filters(self.complaints, {"q": "cmp-2024-000002"})), ["CMP-2024-000002"])

    def test_empty_criteria_returns_everything(self):
        self.assertEqual(apply_complaint_filters(self.complaints, {}), self.complaints)

    def test_status_and_ward_filters(self):
        params = QueryDict("status=Verified&ward=W2")
        self.assertEqual(self.ids(apply_complaint_filters(self.complaints, params)), ["CMP-2024-000003"])

    def test_search_tolerates_missing_values(self):
        complaints = [make("CMP-1", name=None)]
        self.assertEqual(apply_complaint_filters(complaints, {"q": "zzz"}), [])

    def test_filter_does_not_mutate_input(self):
        original = list(self.complaints)
        apply_complaint_filters(self.complaints, {"category": "Drainage"})
        self.assertEqual(self.complaints, original)


class SortTests(SimpleTestCase):
    def test_escalated_low_before_plain_high(self):
        low = make("LOW", escalated=True, severity="Low", created_at="2024-05-01T09:00:00+00:00")
        high = make("HIGH", escalated=False, severity="High", created_at="2024-05-02T09:00:00+00:00")
        self.assertEqual([c.id for c in sort_complaints([high, low])], ["LOW", "HIGH"])

    def test_newer_first_among_equal_escalated_severity(self):
        older = make("OLD", escalated=True, severity="High", created_at="2024-05-01T09:00:00+00:00")
        newer = make("NEW", escalated=True, severity="High", created_at="2024-05-03T09:00:00+00:00")
        self.assertEqual([c.id for c in sort_complaints([older, newer])], ["NEW", "OLD"])

    def test_severity_rank_then_defaults(self):
        complaints = [
            make("LOW", severity="Low", created_at="2024-05-01T09:00:00+00:00"),
            make("UNKNOWN", severity="Urgent", created_at="2024-05-01T09:00:00+00:00"),
            make("HIGH", severity="High", created_at="2024-05-01T09:00:00+00:00"),
        ]
        self.assertEqual([c.id for c in sort_complaints(complaints)], ["HIGH", "UNKNOWN", "LOW"])

    def test_missing_created_at_sorts_last_and_ties_keep_input_order(self):
        complaints = [
            make("A"),
            make("B", created_at="not a date"),
            make("C", created_at="2024-05-01T09:00:00"),
            make("D"),
        ]
        self.assertEqual([c.id for c in sort_complaints(complaints)], ["C", "A", "B", "D"])


class SummaryTests(SimpleTestCase):
    def test_counts_by_status(self):
        complaints = [
            make("A", status=Status.VERIFIED, escalated=True),
            make("B", status=Status.VERIFIED),
            make("C", status=Status.REJECTED),
        ]
        summary = summarize_by_status(complaints)

        self.assertEqual(summary["total"], 3)
        self.assertEqual(summary["escalated"], 1)
        counts = {value: count for value, label, count in summary["by_status"]}
        self.assertEqual(counts["Verified"], 2)
        self.assertEqual(counts["Rejected"], 1)
        self.assertEqual(counts["PendingVerification"], 0)
