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
import unittest
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from buildsteps.cli.main import app

CONFIG_YAML = """
steps:
  - bundle_source_step:
      to: ci-bundle0-sub
      context_dir: operator
      operator_manifests: manifests
      substitute:
        - pullspec: quay.io/openshift/origin-etcd:4.5
          with: etcd
"""


class TestCli(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()
        self.tmp = tempfile.TemporaryDirectory()
        self.config = Path(self.tmp.name) / "config.yaml"
        self.config.write_text(CONFIG_YAML)

    def tearDown(self):
        self.tmp.cleanup()

    def test_render(self):
        result = self.runner.invoke(app, ["render", "-c", str(self.config)])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("ci-bundle0-sub", result.output)
        self.assertIn("FROM pipeline:src", result.output)

    @patch("buildsteps.cli.main.load_custom_objects_api")
    def test_dry_run(self, mock_load):
        result = self.runner.invoke(
            app,
            ["run", "-c", str(self.config), "--target", "ci-bundle0-sub", "--dry", "-n", "ci-op-1"],
        )

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("kind: Build", result.output)
        mock_load.assert_not_called()

    def test_unknown_target(self):
        result = self.runner.invoke(app, ["run", "-c", str(self.config), "--target", "missing", "--dry"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("missing", result.output)

    def test_version(self):
        result = self.runner.invoke(app, ["--version"])

        self.assertEqual(result.exit_code, 0)
        self.assertIn("0.1.0", result.output)


if __name__ == '__main__':
    unittest.main()
