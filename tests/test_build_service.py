# Copyright The Volcano Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import tempfile
import threading
import unittest
from pathlib import Path
from unittest.mock import Mock

import yaml
from kubernetes.client.rest import ApiException

from buildsteps.exceptions import BuildSubmissionError
from buildsteps.models.build import BuildRequest, ImageSource
from buildsteps.services.build_service import KubernetesBuildSubmitter
from buildsteps.utils.log import DryLogger


def make_request():
    return BuildRequest(
        name="bundle-sub",
        namespace="ci-op-1",
        from_tag="src",
        to_tag="bundle-sub",
        dockerfile="\nFROM pipeline:src\n",
        images=[ImageSource(from_image="pipeline:src", source_path="/src/./.")],
        labels={"creates": "bundle-sub"},
    )


def build_in_phase(phase, **status):
    status["phase"] = phase
    return {"metadata": {"name": "bundle-sub"}, "status": status}


class TestKubernetesBuildSubmitter(unittest.TestCase):
    def setUp(self):
        self.api = Mock()
        self.submitter = KubernetesBuildSubmitter(self.api, poll_interval=0, timeout=5)

    def test_dry_run_records_build(self):
        dry_logger = DryLogger()

        self.submitter.submit(threading.Event(), make_request(), True, None, dry_logger)

        self.api.create_namespaced_custom_object.assert_not_called()
        self.assertEqual(len(dry_logger.objects), 1)
        self.assertEqual(dry_logger.objects[0]["kind"], "Build")
        self.assertIn("name: bundle-sub", dry_logger.dump())

    def test_waits_for_completion(self):
        self.api.get_namespaced_custom_object.side_effect = [
            build_in_phase("New"),
            build_in_phase("Running"),
            build_in_phase("Complete"),
        ]

        self.submitter.submit(threading.Event(), make_request(), False, None, DryLogger())

        body = self.api.create_namespaced_custom_object.call_args.kwargs["body"]
        self.assertEqual(body["metadata"]["name"], "bundle-sub")
        self.assertEqual(self.api.create_namespaced_custom_object.call_args.kwargs["plural"], "builds")
        self.assertEqual(self.api.get_namespaced_custom_object.call_count, 3)

    def test_reuses_existing_build(self):
        self.api.create_namespaced_custom_object.side_effect = ApiException(status=409, reason="Conflict")
        self.api.get_namespaced_custom_object.return_value = build_in_phase("Complete")

        self.submitter.submit(threading.Event(), make_request(), False, None, DryLogger())

        self.api.get_namespaced_custom_object.assert_called_once()

    def test_create_error(self):
        self.api.create_namespaced_custom_object.side_effect = ApiException(status=403, reason="Forbidden")

        with self.assertRaises(BuildSubmissionError):
            self.submitter.submit(threading.Event(), make_request(), False, None, DryLogger())

    def test_failed_build_saves_artifact(self):
        self.api.get_namespaced_custom_object.return_value = build_in_phase("Failed", message="Docker build strategy has failed.")

        with tempfile.TemporaryDirectory() as artifact_dir:
            with self.assertRaises(BuildSubmissionError) as cm:
                self.submitter.submit(threading.Event(), make_request(), False, artifact_dir, DryLogger())

            saved = yaml.safe_load((Path(artifact_dir) / "builds" / "bundle-sub.yaml").read_text())

        self.assertIn("Failed", str(cm.exception))
        self.assertIn("Docker build strategy has failed.", str(cm.exception))
        self.assertEqual(saved["status"]["phase"], "Failed")

    def test_cancelled_context(self):
        ctx = threading.Event()
        ctx.set()

        with self.assertRaises(BuildSubmissionError) as cm:
            self.submitter.submit(ctx, make_request(), False, None, DryLogger())

        self.assertIn("cancelled", str(cm.exception))
        self.api.get_namespaced_custom_object.assert_not_called()

    def test_timeout(self):
        self.api.get_namespaced_custom_object.return_value = build_in_phase("Running")
        submitter = KubernetesBuildSubmitter(self.api, poll_interval=0, timeout=0)

        with self.assertRaises(BuildSubmissionError) as cm:
            submitter.submit(threading.Event(), make_request(), False, None, DryLogger())

        self.assertIn("did not complete", str(cm.exception))


if __name__ == '__main__':
    unittest.main()
