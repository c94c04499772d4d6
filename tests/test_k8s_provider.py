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

import unittest
from unittest.mock import Mock, patch

from kubernetes import config
from kubernetes.client.rest import ApiException

from buildsteps.exceptions import WorkingDirError
from buildsteps.services.k8s_provider import (
    ImageStreamStatus,
    KubernetesImageStreamReader,
    KubernetesWorkingDirResolver,
    load_custom_objects_api,
)


class TestKubernetesImageStreamReader(unittest.TestCase):
    def test_reads_repositories(self):
        api = Mock()
        api.get_namespaced_custom_object.return_value = {
            "status": {
                "publicDockerImageRepository": "registry.example.com/ns/stable",
                "dockerImageRepository": "image-registry.svc:5000/ns/stable",
            }
        }

        status = KubernetesImageStreamReader(api).get_stream("ns", "stable")

        self.assertEqual(status, ImageStreamStatus(
            public_docker_image_repository="registry.example.com/ns/stable",
            docker_image_repository="image-registry.svc:5000/ns/stable",
        ))
        api.get_namespaced_custom_object.assert_called_once_with(
            group="image.openshift.io",
            version="v1",
            namespace="ns",
            plural="imagestreams",
            name="stable",
        )

    def test_missing_status(self):
        api = Mock()
        api.get_namespaced_custom_object.return_value = {"metadata": {"name": "stable"}}

        self.assertEqual(KubernetesImageStreamReader(api).get_stream("ns", "stable"), ImageStreamStatus())

    def test_propagates_api_errors(self):
        api = Mock()
        api.get_namespaced_custom_object.side_effect = ApiException(status=403, reason="Forbidden")

        with self.assertRaises(ApiException):
            KubernetesImageStreamReader(api).get_stream("ns", "stable")


class TestKubernetesWorkingDirResolver(unittest.TestCase):
    def test_reads_working_dir(self):
        api = Mock()
        api.get_namespaced_custom_object.return_value = {
            "image": {"dockerImageMetadata": {"Config": {"WorkingDir": "/go/src/github.com/org/repo"}}}
        }

        working_dir = KubernetesWorkingDirResolver(api, verbose=True).resolve("pipeline:src", "ns")

        self.assertEqual(working_dir, "/go/src/github.com/org/repo")
        self.assertEqual(api.get_namespaced_custom_object.call_args.kwargs["plural"], "imagestreamtags")
        self.assertEqual(api.get_namespaced_custom_object.call_args.kwargs["name"], "pipeline:src")

    def test_missing_tag(self):
        api = Mock()
        api.get_namespaced_custom_object.side_effect = ApiException(status=404, reason="Not Found")

        with self.assertRaises(WorkingDirError) as cm:
            KubernetesWorkingDirResolver(api).resolve("pipeline:src", "ns")

        self.assertIn("does not exist", str(cm.exception))

    def test_missing_metadata(self):
        api = Mock()
        api.get_namespaced_custom_object.return_value = {"image": {}}

        with self.assertRaises(WorkingDirError):
            KubernetesWorkingDirResolver(api).resolve("pipeline:src", "ns")


class TestLoadCustomObjectsApi(unittest.TestCase):
    @patch("buildsteps.services.k8s_provider.client.CustomObjectsApi")
    @patch("buildsteps.services.k8s_provider.config.load_kube_config")
    @patch("buildsteps.services.k8s_provider.config.load_incluster_config")
    def test_falls_back_to_local_config(self, mock_incluster, mock_kube, mock_api):
        mock_incluster.side_effect = config.ConfigException("not in cluster")

        api = load_custom_objects_api()

        mock_kube.assert_called_once_with()
        self.assertIs(api, mock_api.return_value)

    @patch("buildsteps.services.k8s_provider.config.load_kube_config")
    def test_wraps_load_errors(self, mock_kube):
        mock_kube.side_effect = config.ConfigException("bad kubeconfig")

        with self.assertRaises(RuntimeError):
            load_custom_objects_api("/nonexistent/kubeconfig")


if __name__ == '__main__':
    unittest.main()
