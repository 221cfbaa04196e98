import os, json, tempfile
import unittest as test

from researchspace.base.config import ConfigurationException
from researchspace.repository import Subject, License, LicenseDef
from researchspace.dryad import utils

tmpdir = tempfile.TemporaryDirectory(prefix="_test_utils.")

def tearDownModule():
    tmpdir.cleanup()

class TestSubjects(test.TestCase):

    def write_domains(self, content):
        path = os.path.join(tmpdir.name, "domains.json")
        with open(path, 'w') as fd:
            fd.write(content)
        return path

    def test_bundled(self):
        subjects = utils.get_dryad_subjects()
        self.assertEqual(len(subjects), 48)
        self.assertEqual(subjects[0], Subject("Natural sciences"))
        self.assertIn(Subject("Mathematics"), subjects)
        self.assertIn(Subject("Other natural sciences"), subjects)
        self.assertTrue(all(isinstance(s, Subject) for s in subjects))

        # fresh list each time
        subjects.pop()
        self.assertEqual(len(utils.get_dryad_subjects()), 48)

    def test_alternate_file(self):
        path = self.write_domains(json.dumps({"domains": ["Goobology", "Gurnistry"]}))
        self.assertEqual(utils.get_dryad_subjects(path),
                         [Subject("Goobology"), Subject("Gurnistry")])

        path = self.write_domains(json.dumps({"domains": []}))
        self.assertEqual(utils.get_dryad_subjects(path), [])

    def test_bad_file(self):
        with self.assertRaises(ConfigurationException):
            utils.get_dryad_subjects(os.path.join(tmpdir.name, "goober.json"))

        path = self.write_domains("{ domains: [")
        with self.assertRaises(ConfigurationException):
            utils.get_dryad_subjects(path)

        path = self.write_domains(json.dumps({"fields": ["Goobology"]}))
        with self.assertRaises(ConfigurationException):
            utils.get_dryad_subjects(path)

        path = self.write_domains(json.dumps({"domains": "Goobology"}))
        with self.assertRaises(ConfigurationException):
            utils.get_dryad_subjects(path)

        path = self.write_domains(json.dumps({"domains": ["Goobology", 3]}))
        with self.assertRaises(ConfigurationException):
            utils.get_dryad_subjects(path)

        path = self.write_domains(json.dumps(["Goobology"]))
        with self.assertRaises(ConfigurationException):
            utils.get_dryad_subjects(path)

class TestLicenses(test.TestCase):

    def test_licenses(self):
        lics = utils.get_dryad_licenses()
        self.assertEqual(len(lics), 1)
        self.assertEqual(lics[0], License(LicenseDef(utils.CC0_URL, "CC-0")))
        self.assertEqual(lics[0].license_definition.url,
                         "https://creativecommons.org/publicdomain/zero/1.0/")
        self.assertFalse(lics[0].default_license)


if __name__ == '__main__':
    test.main()
