import json
import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

from lims_qc import QualityControlService
from lims_qc.config import Settings
from lims_qc.metrics import QualityMetrics
from lims_qc.rules import RULES_DIR, clear_rule_cache


PCR_RECORD = {'sampleCode': 'PCR001', 'pcrProduct': 2, 'amplificationSuccess': 'success'}


class TestQualityControlService(unittest.TestCase):
    def setUp(self):
        self.metrics = QualityMetrics()
        self.service = QualityControlService(settings=Settings(), metrics=self.metrics)

    def test_evaluate(self):
        results, score = self.service.evaluate('pcr_amplification', PCR_RECORD)

        self.assertEqual(len(results), 2)
        self.assertEqual(score.total_score, 84)
        self.assertEqual(self.metrics.total_records, 1)
        self.assertEqual(self.metrics.duration_count, 1)

    def test_validator_is_built_once_per_type(self):
        first = self.service.validator('pcr_amplification')
        second = self.service.validator(first.experiment_type)

        self.assertIs(first, second)
        self.assertIsNot(first, self.service.validator('library_construction'))

    def test_should_advance(self):
        _, passing = self.service.evaluate('pcr_amplification', PCR_RECORD)
        _, failing = self.service.evaluate('pcr_amplification', {})

        self.assertTrue(self.service.should_advance(passing))
        self.assertFalse(self.service.should_advance(failing))

    def test_report_records_metrics_per_record(self):
        report = self.service.report('pcr_amplification', [PCR_RECORD, {}])

        self.assertEqual(report.summary.total_records, 2)
        self.assertEqual(self.metrics.total_records, 2)

    def test_export_report(self):
        content = self.service.export_report('pcr_amplification', [PCR_RECORD])
        data = json.loads(content)

        self.assertEqual(data['experimentType'], 'pcr_amplification')
        self.assertEqual(data['summary']['averageScore'], 84)
        self.assertEqual(
            data['recommendations'],
            ['PCR产物浓度过低 (影响 1 条记录)', '扩增成功时建议记录条带大小 (影响 1 条记录)'])

    def test_metrics_disabled(self):
        service = QualityControlService(settings=Settings(enable_metrics=False), metrics=self.metrics)
        service.evaluate('pcr_amplification', PCR_RECORD)

        self.assertEqual(self.metrics.total_records, 0)


class TestServiceSettings(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.addCleanup(clear_rule_cache)

    def test_custom_rules_directory(self):
        for name in ('nucleic_extraction.yaml', 'pcr_amplification.yaml', 'library_construction.yaml'):
            shutil.copy(os.path.join(RULES_DIR, name), self.tmpdir.name)
        with open(os.path.join(self.tmpdir.name, 'pcr_amplification.yaml'), 'a', encoding='utf-8') as f:
            f.write("""
  - name: Ct值验证
    field: ctValue
    check_type: numeric
    tiers:
      - when: {gt: 35}
        level: error
        message: Ct值过高
""")

        service = QualityControlService(
            settings=Settings(rules_dir=self.tmpdir.name), metrics=QualityMetrics())
        results, _ = service.evaluate('pcr_amplification', dict(PCR_RECORD, ctValue=38))

        self.assertEqual(len(service.validator('pcr_amplification').rules), 5)
        self.assertEqual(results[-1].message, 'Ct值过高')

    def test_custom_standards_file(self):
        path = os.path.join(self.tmpdir.name, 'standards.yaml')
        with open(path, 'w', encoding='utf-8') as f:
            f.write("""
pcr_amplification:
  - name: Ct
    parameter: ctValue
    min_value: 10
    max_value: 30
""")

        service = QualityControlService(
            settings=Settings(standards_path=path), metrics=QualityMetrics())
        check = service.validator('pcr_amplification').check_value_against_standard('ctValue', 32)

        self.assertFalse(check.is_valid)
        self.assertEqual(check.message, 'ctValue超出最大允许值 30')

    def test_settings_from_env(self):
        env = {
            'LIMS_QC_RULES_DIR': '/srv/rules',
            'LIMS_QC_ENABLE_METRICS': 'false',
            'LIMS_QC_LOG_LEVEL': 'debug',
            'LIMS_QC_LOG_FORMAT': 'JSON',
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings.from_env(dotenv=False)

        self.assertEqual(settings.rules_dir, '/srv/rules')
        self.assertIsNone(settings.standards_path)
        self.assertFalse(settings.enable_metrics)
        self.assertEqual(settings.log_level, 'DEBUG')
        self.assertEqual(settings.log_format, 'json')

    def test_settings_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings.from_env(dotenv=False)

        self.assertEqual(settings, Settings())


if __name__ == '__main__':
    unittest.main()
