import os, json, tempfile
import unittest as test
from unittest.mock import patch, MagicMock
from pathlib import Path

import requests

from researchspace.base.config import ConfigurationException
from researchspace.dryad import (DryadServerError, DryadCommError, DryadClientError,
                                 DryadResourceNotFound, DryadAuthenticationError,
                                 DryadServiceException)
from researchspace.dryad.client import DryadClientImpl
from researchspace.dryad.model import DryadSubmission, DryadAuthor, DryadDataset, DryadFile

datadir = Path(__file__).parents[0] / "data"
testfile = datadir / "test.txt"
BASEURL = "https://dryad-stg.cdlib.org/api/v2"

def fake_response(status=200, json_data=None, reason="OK", text=None):
    resp = MagicMock()
    resp.status_code = status
    resp.reason = reason
    if json_data is None and text is not None:
        resp.text = text
        resp.json.side_effect = ValueError("Expecting value")
    else:
        resp.text = json.dumps(json_data or {})
        resp.json.return_value = json_data or {}
    return resp

def dataset_json():
    with open(datadir / "datasetCreationResponse.json") as fd:
        return json.load(fd)

class TestDryadClientImpl(test.TestCase):

    def setUp(self):
        self.cli = DryadClientImpl(BASEURL+"/", "token123", {"timeout": 5})
        self.sub = DryadSubmission("title", "desc", "Other natural sciences",
                                   [DryadAuthor("anyone", email="email@somewhere.com")], [], "")

    def test_ctor(self):
        self.assertEqual(self.cli.baseurl, BASEURL)
        self.assertEqual(self.cli.timeout, 5)
        self.assertEqual(self.cli._authhdr, {"Authorization": "Bearer token123"})

        cli = DryadClientImpl(BASEURL, "token123")
        self.assertEqual(cli.timeout, 60)

        with self.assertRaises(ConfigurationException):
            DryadClientImpl(BASEURL, None)
        with self.assertRaises(ConfigurationException):
            DryadClientImpl("", "token123")

    @patch("researchspace.dryad.client.requests.request")
    def test_create_submission(self, mock_req):
        mock_req.return_value = fake_response(201, dataset_json(), "Created")

        ds = self.cli.create_submission(self.sub)
        self.assertIsInstance(ds, DryadDataset)
        self.assertEqual(ds.identifier, "doi:10.7959/dryad.5dv41ns2h")
        self.assertEqual(ds.edit_link, "/stash/edit/doi%3A10.7959%2Fdryad.5dv41ns2h/9pnE2U9VVe3mMQ")
        self.assertEqual(ds.version_status, "in_progress")

        args, kwargs = mock_req.call_args
        self.assertEqual(args[0], "POST")
        self.assertEqual(args[1], BASEURL+"/datasets")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer token123")
        self.assertEqual(kwargs["headers"]["Content-Type"], "application/json")
        self.assertEqual(kwargs["timeout"], 5)
        self.assertEqual(kwargs["json"]["fieldOfScience"], "Other natural sciences")
        self.assertEqual(kwargs["json"]["authors"],
                         [{"firstName": "anyone", "email": "email@somewhere.com"}])

    @patch("researchspace.dryad.client.requests.request")
    def test_create_submission_errors(self, mock_req):
        mock_req.return_value = fake_response(500, reason="Internal Server Error")
        with self.assertRaises(DryadServerError) as cm:
            self.cli.create_submission(self.sub)
        self.assertEqual(cm.exception.code, 500)
        self.assertEqual(cm.exception.resource, "/datasets")

        mock_req.return_value = fake_response(401, reason="Unauthorized")
        with self.assertRaises(DryadAuthenticationError):
            self.cli.create_submission(self.sub)

        mock_req.return_value = fake_response(404, reason="Not Found")
        with self.assertRaises(DryadResourceNotFound):
            self.cli.create_submission(self.sub)

        mock_req.return_value = fake_response(422, {"error": "bad"}, reason="Unprocessable Entity")
        with self.assertRaises(DryadClientError) as cm:
            self.cli.create_submission(self.sub)
        self.assertEqual(cm.exception.code, 422)

        mock_req.return_value = fake_response(204, reason="No Content")
        with self.assertRaises(DryadServerError):
            self.cli.create_submission(self.sub)

        mock_req.return_value = fake_response(201, text="<html><body>Welcome</body></html>")
        with self.assertRaises(DryadServerError) as cm:
            self.cli.create_submission(self.sub)
        self.assertIn("HTML", str(cm.exception))

        mock_req.return_value = fake_response(201, ["not", "an", "object"])
        with self.assertRaises(DryadServerError):
            self.cli.create_submission(self.sub)

        mock_req.return_value = fake_response(201, {"editLink": "/stash/edit/x/y"}, "Created")
        with self.assertRaises(DryadServerError) as cm:
            self.cli.create_submission(self.sub)
        self.assertIn("Unexpected dataset description", str(cm.exception))

        mock_req.return_value = None
        mock_req.side_effect = requests.ConnectionError("Connection refused")
        with self.assertRaises(DryadCommError) as cm:
            self.cli.create_submission(self.sub)
        self.assertIn("Connection refused", str(cm.exception))
        self.assertIsInstance(cm.exception, DryadServiceException)

    @patch("researchspace.dryad.client.requests.request")
    def test_stage_file(self, mock_req):
        mock_req.return_value = fake_response(201, {"path": "test.txt", "size": 44,
                                                    "mimeType": "text/plain",
                                                    "status": "created"})

        df = self.cli.stage_file("doi:10.7959/dryad.5dv41ns2h", "test.txt", testfile)
        self.assertIsInstance(df, DryadFile)
        self.assertEqual(df.path, "test.txt")
        self.assertEqual(df.status, "created")
        self.assertEqual(df.mime_type, "text/plain")

        args, kwargs = mock_req.call_args
        self.assertEqual(args[0], "PUT")
        self.assertEqual(args[1],
                         BASEURL+"/datasets/doi%3A10.7959%2Fdryad.5dv41ns2h/files/test.txt")
        self.assertEqual(kwargs["data"], testfile.read_bytes())
        self.assertEqual(kwargs["headers"]["Content-Type"], "text/plain")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer token123")

        self.cli.stage_file("doi:10.7959/dryad.5dv41ns2h", "my data.goob", b"hello")
        args, kwargs = mock_req.call_args
        self.assertTrue(args[1].endswith("/files/my%20data.goob"))
        self.assertEqual(kwargs["data"], b"hello")
        self.assertEqual(kwargs["headers"]["Content-Type"], "application/octet-stream")

    @patch("researchspace.dryad.client.requests.request")
    def test_stage_file_errors(self, mock_req):
        with tempfile.TemporaryDirectory(prefix="_test_client.") as tmpdir:
            with self.assertRaises(OSError):
                self.cli.stage_file("doi:10.7959/dryad.5dv41ns2h", "gone.txt",
                                    os.path.join(tmpdir, "gone.txt"))
        mock_req.assert_not_called()

        mock_req.return_value = fake_response(403, reason="Forbidden")
        with self.assertRaises(DryadAuthenticationError) as cm:
            self.cli.stage_file("doi:10.7959/dryad.5dv41ns2h", "test.txt", testfile)
        self.assertEqual(cm.exception.code, 403)

        mock_req.return_value = None
        mock_req.side_effect = requests.Timeout("read timed out")
        with self.assertRaises(DryadCommError):
            self.cli.stage_file("doi:10.7959/dryad.5dv41ns2h", "test.txt", testfile)

    @patch("researchspace.dryad.client.requests.request")
    def test_test_connection(self, mock_req):
        mock_req.return_value = fake_response(200, {"message": "Welcome application owner"})
        self.assertTrue(self.cli.test_connection())
        args, kwargs = mock_req.call_args
        self.assertEqual(args[0], "GET")
        self.assertEqual(args[1], BASEURL+"/test")

        mock_req.return_value = fake_response(401, reason="Unauthorized")
        self.assertFalse(self.cli.test_connection())

        mock_req.return_value = None
        mock_req.side_effect = requests.ConnectionError("Name or service not known")
        with self.assertRaises(DryadCommError):
            self.cli.test_connection()


if __name__ == '__main__':
    test.main()
