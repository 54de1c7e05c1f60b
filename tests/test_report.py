import json
import os
import tempfile
import unittest
from datetime import datetime, timezone

from lims_qc import create_validator
from lims_qc.models import ValidationLevel
from lims_qc.reports import ReportGenerator


def sample_records():
    return [
        {'id': 'R1', 'sampleCode': 'DNA001', 'dnaConcentration': 5, 'dnaVolume': 100},
        {'id': 'R2', 'sampleCode': 'DNA002', 'dnaConcentration': 8, 'dnaVolume': 100},
        {'id': 'R3', 'sampleCode': 'DNA003', 'dnaConcentration': 100, 'dnaVolume': 10},
        {'id': 'R4', 'sampleCode': 'DNA004', 'dnaConcentration': 1500, 'dnaVolume': 100},
    ]


class TestQualityReport(unittest.TestCase):
    def setUp(self):
        self.validator = create_validator('nucleic_extraction')
        self.report = self.validator.generate_quality_report(sample_records())

    def test_summary(self):
        summary = self.report.summary

        self.assertEqual(summary.total_records, 4)
        self.assertEqual(summary.valid_records, 4)
        self.assertEqual(summary.error_records, 1)
        self.assertEqual(summary.warning_records, 3)
        self.assertEqual(summary.average_score, 90.25)

    def test_details_keep_input_order(self):
        self.assertEqual([d.record_id for d in self.report.details], ['R1', 'R2', 'R3', 'R4'])
        self.assertEqual([d.score.total_score for d in self.report.details], [92, 92, 92, 85])
        self.assertTrue(self.report.details[3].has_errors)
        self.assertFalse(self.report.details[0].has_errors)
        self.assertTrue(self.report.details[0].has_warnings)

    def test_recommendations_most_frequent_first(self):
        self.assertEqual(len(self.report.recommendations), 3)
        self.assertEqual(
            self.report.recommendations[0], 'DNA浓度过低，可能影响后续实验 (影响 2 条记录)')
        self.assertEqual(
            self.report.recommendations[1:],
            ['DNA体积较少，可能不足以进行后续实验 (影响 1 条记录)',
             'DNA浓度异常高，请检查测量结果 (影响 1 条记录)'])

    def test_recommendations_capped_at_five(self):
        records = [
            {'sampleCode': '', 'dnaConcentration': -1, 'purity260_280': 1.0, 'dnaVolume': 0},
            {'sampleCode': 'bad', 'dnaConcentration': 5, 'purity260_280': 3.0, 'dnaVolume': 10},
            {'sampleCode': 'DNA001', 'dnaConcentration': 500, 'purity260_280': 1.9, 'dnaVolume': 600},
        ]
        report = self.validator.generate_quality_report(records)

        self.assertEqual(len(report.recommendations), 5)
        for recommendation in report.recommendations:
            self.assertIn('(影响 1 条记录)', recommendation)

    def test_average_score_rounds_half_up(self):
        clean = {'sampleCode': 'DNA001', 'dnaConcentration': 100, 'dnaVolume': 100}
        records = [dict(clean) for _ in range(7)] + [dict(clean, dnaConcentration=-5)]

        report = self.validator.generate_quality_report(records)

        # (7 * 100 + 85) / 8 = 98.125
        self.assertEqual(report.summary.average_score, 98.13)

    def test_grade_distribution(self):
        self.assertEqual(self.report.grade_distribution, {'A': 3, 'B': 1, 'C': 0, 'D': 0, 'F': 0})

    def test_empty_report(self):
        report = self.validator.generate_quality_report([])

        self.assertEqual(report.summary.total_records, 0)
        self.assertEqual(report.summary.average_score, 0.0)
        self.assertEqual(report.details, [])
        self.assertEqual(report.recommendations, [])

    def test_report_matches_per_record_calls(self):
        records = sample_records()
        for detail, record in zip(self.report.details, records):
            self.assertEqual(detail.validation_results, self.validator.validate_record(record))
            self.assertEqual(detail.score, self.validator.calculate_quality_score(record))

    def test_export_dict(self):
        timestamp = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        data = self.report.to_export_dict('nucleic_extraction', timestamp=timestamp)

        self.assertEqual(set(data), {'timestamp', 'experimentType', 'summary', 'recommendations'})
        self.assertEqual(data['timestamp'], '2024-01-15T10:30:00+00:00')
        self.assertEqual(data['experimentType'], 'nucleic_extraction')
        self.assertEqual(data['summary']['averageScore'], 90.25)
        self.assertEqual(data['summary']['errorRecords'], 1)


class TestReportGenerator(unittest.TestCase):
    def setUp(self):
        self.report = create_validator('nucleic_extraction').generate_quality_report(sample_records())
        self.generated_at = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def test_text_report(self):
        text = ReportGenerator.generate_text_report(
            self.report, 'nucleic_extraction', generated_at=self.generated_at)

        self.assertIn('LIMS DATA QUALITY REPORT', text)
        self.assertIn('Generated:       2024-01-15 10:30:00 UTC', text)
        self.assertIn('Average Score:    90.25', text)
        self.assertIn('RECORDS WITH ISSUES (4)', text)
        self.assertIn('[B] R4  score 85/100', text)
        self.assertIn('  1. DNA浓度过低，可能影响后续实验 (影响 2 条记录)', text)
        self.assertTrue(text.rstrip().endswith('=' * 80))

    def test_text_report_lists_most_severe_first(self):
        record = {'sampleCode': 'DNA001', 'dnaConcentration': 1500, 'purity260_280': 1.9, 'dnaVolume': 10}
        report = create_validator('nucleic_extraction').generate_quality_report([record])

        text = ReportGenerator.generate_text_report(report, 'nucleic_extraction')

        error_at = text.index('DNA浓度异常高')
        warning_at = text.index('DNA体积较少')
        info_at = text.index('DNA纯度优秀')
        self.assertLess(error_at, warning_at)
        self.assertLess(warning_at, info_at)

    def test_text_report_for_no_records(self):
        report = create_validator('pcr_amplification').generate_quality_report([])
        text = ReportGenerator.generate_text_report(report, 'pcr_amplification')

        self.assertIn('No records to report.', text)
        self.assertNotIn('RECOMMENDATIONS', text)

    def test_json_report(self):
        content = ReportGenerator.generate_json_report(
            self.report, 'nucleic_extraction', generated_at=self.generated_at)
        data = json.loads(content)

        self.assertEqual(data['experimentType'], 'nucleic_extraction')
        self.assertNotIn('details', data)
        self.assertIn('DNA浓度过低', content)

    def test_json_report_with_details(self):
        content = ReportGenerator.generate_json_report(
            self.report, 'nucleic_extraction', include_details=True)
        data = json.loads(content)

        self.assertEqual(len(data['details']), 4)
        self.assertEqual(data['details'][3]['recordId'], 'R4')
        self.assertEqual(data['details'][3]['validationResults'][0]['level'], 'error')

    def test_count_by_level(self):
        counts = ReportGenerator.count_by_level(self.report)

        self.assertEqual(counts, {
            ValidationLevel.INFO.value: 0,
            ValidationLevel.WARNING.value: 3,
            ValidationLevel.ERROR.value: 1,
            ValidationLevel.CRITICAL.value: 0,
        })

    def test_save_report(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'report.json')
            ReportGenerator.save_report(self.report, 'nucleic_extraction', path, format='json')

            with open(path, encoding='utf-8') as f:
                data = json.load(f)

        self.assertEqual(data['summary']['totalRecords'], 4)


if __name__ == '__main__':
    unittest.main()
