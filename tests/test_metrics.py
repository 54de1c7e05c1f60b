import unittest

from lims_qc import create_validator
from lims_qc.metrics import QualityMetrics, get_metrics, metrics_endpoint, reset_metrics


class TestQualityMetrics(unittest.TestCase):
    def setUp(self):
        self.metrics = QualityMetrics()
        self.validator = create_validator('pcr_amplification')

    def _record(self, record, duration=None):
        results = self.validator.validate_record(record)
        score = self.validator.calculate_quality_score(record)
        self.metrics.record_evaluation('pcr_amplification', results, score, duration)

    def test_record_evaluation(self):
        self._record({'sampleCode': 'PCR001', 'pcrProduct': 2, 'amplificationSuccess': 'success'}, 0.002)
        self._record({'sampleCode': 'PCR002', 'pcrProduct': 50, 'amplificationSuccess': 'success',
                      'bandSize': 500}, 0.0002)

        self.assertEqual(self.metrics.total_records, 2)
        self.assertEqual(self.metrics.records_by_type['pcr_amplification'], 2)
        self.assertEqual(dict(self.metrics.records_by_grade), {'B': 1, 'A': 1})
        self.assertEqual(dict(self.metrics.findings_by_level), {'warning': 2})
        self.assertEqual(self.metrics.findings_by_field['bandSize'], 1)
        self.assertEqual(self.metrics.average_score, 92.0)

    def test_export_text(self):
        self._record({'sampleCode': 'PCR001', 'pcrProduct': 2, 'amplificationSuccess': 'success'}, 0.002)

        text = self.metrics.export_text()

        self.assertIn('# TYPE lims_qc_records_validated_total counter', text)
        self.assertIn('lims_qc_records_validated_total{experiment_type="pcr_amplification"} 1', text)
        self.assertIn('lims_qc_findings_total{level="warning"} 2', text)
        self.assertIn('lims_qc_records_by_grade{grade="B"} 1', text)
        self.assertIn('lims_qc_validation_duration_seconds_bucket{le="0.001"} 0', text)
        self.assertIn('lims_qc_validation_duration_seconds_bucket{le="0.005"} 1', text)
        self.assertIn('lims_qc_validation_duration_seconds_bucket{le="+Inf"} 1', text)
        self.assertIn('lims_qc_average_score 84.00', text)

    def test_export_json(self):
        self._record({'sampleCode': 'PCR001', 'pcrProduct': 50, 'amplificationSuccess': 'failed'})

        data = self.metrics.export_json()

        self.assertEqual(data['total_records'], 1)
        self.assertEqual(data['pass_rate'], 1.0)
        self.assertEqual(data['avg_processing_time_seconds'], 0)

    def test_reset(self):
        self._record({}, 0.01)
        self.metrics.reset()

        self.assertEqual(self.metrics.total_records, 0)
        self.assertEqual(self.metrics.average_score, 0.0)
        self.assertEqual(self.metrics.export_json()['records_by_grade'], {})


class TestGlobalMetrics(unittest.TestCase):
    def tearDown(self):
        reset_metrics()

    def test_singleton(self):
        self.assertIs(get_metrics(), get_metrics())

    def test_endpoint_exports_global_instance(self):
        reset_metrics()
        self.assertIn('lims_qc_average_score 0.00', metrics_endpoint())


if __name__ == '__main__':
    unittest.main()
