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

"""
Main CLI entry point for build steps.

This module defines the command-line interface using Typer, for rendering
and running individual steps outside of a full pipeline.
"""

import logging
import threading
from pathlib import Path
from typing import Optional

import typer
from kubernetes import client
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from buildsteps.models.config import JobSpec
from buildsteps.services.build_service import KubernetesBuildSubmitter
from buildsteps.services.config_service import ConfigService
from buildsteps.services.k8s_provider import (
    KubernetesImageStreamReader,
    KubernetesWorkingDirResolver,
    load_custom_objects_api,
)
from buildsteps.steps import BundleSourceStep, ExecutionMode, StepClients, build_step
from buildsteps.utils.log import DryLogger

console = Console()

app = typer.Typer(
    name="buildsteps",
    help="Render and run container image build steps",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        from buildsteps import __version__
        console.print(f"buildsteps version: [bold green]{__version__}[/bold green]")
        raise typer.Exit()

@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose output",
    ),
) -> None:
    """Build step tooling for container image pipelines."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


def _clients(custom_api: Optional[client.CustomObjectsApi], verbose: bool) -> StepClients:
    return StepClients(
        build_submitter=KubernetesBuildSubmitter(custom_api, verbose=verbose),
        image_streams=KubernetesImageStreamReader(custom_api, verbose=verbose),
        working_dirs=KubernetesWorkingDirResolver(custom_api, verbose=verbose),
    )


@app.command()
def render(
    config: str = typer.Option(
        ...,
        "-c",
        "--config",
        help="Path to the pipeline configuration file",
    ),
    target: Optional[str] = typer.Option(
        None,
        "--target",
        help="Only render the step with this name",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable detailed logging",
    ),
) -> None:
    """
    Print the Dockerfile of each bundle source step.

    Pull specs are resolved in simulated mode, so no cluster is contacted.
    """
    try:
        service = ConfigService(verbose=verbose)
        configuration = service.load(Path(config).resolve())
        steps = [service.find_step(configuration, target)] if target else configuration.steps

        clients = _clients(None, verbose)
        job_spec = JobSpec.from_env()
        for step_config in steps:
            step = build_step(step_config, configuration.resources, clients, job_spec, None, DryLogger())
            if not isinstance(step, BundleSourceStep):
                continue
            console.rule(f"[bold]{step.name()}[/bold]")
            console.print(step.dockerfile(ExecutionMode.SIMULATED), markup=False, highlight=False)

    except Exception as e:
        console.print(f"❌ Error rendering steps: [red]{str(e)}[/red]")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise typer.Exit(1)

@app.command()
def run(
    config: str = typer.Option(
        ...,
        "-c",
        "--config",
        help="Path to the pipeline configuration file",
    ),
    target: str = typer.Option(
        ...,
        "--target",
        help="Name of the step to run",
    ),
    dry: bool = typer.Option(
        False,
        "--dry",
        help="Simulate the run and print the objects it would create",
    ),
    namespace: Optional[str] = typer.Option(
        None,
        "-n",
        "--namespace",
        help="Namespace holding the pipeline images (defaults to $NAMESPACE)",
    ),
    artifact_dir: Optional[str] = typer.Option(
        None,
        "--artifact-dir",
        help="Directory to store build results in",
    ),
    pull_secret: Optional[str] = typer.Option(
        None,
        "--pull-secret",
        help="Name of the secret used to pull the base image",
    ),
    kubeconfig: Optional[str] = typer.Option(
        None,
        "--kubeconfig",
        help="Path to kubeconfig file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable detailed logging",
    ),
) -> None:
    """
    Run a single step.

    Steps this one requires must already have produced their images.
    """
    dry_logger = DryLogger()
    try:
        service = ConfigService(verbose=verbose)
        configuration = service.load(Path(config).resolve())
        step_config = service.find_step(configuration, target)

        job_spec = JobSpec.from_env(namespace)
        custom_api = None if dry else load_custom_objects_api(kubeconfig)
        secret = None
        if pull_secret:
            secret = client.V1Secret(metadata=client.V1ObjectMeta(name=pull_secret, namespace=job_spec.namespace))

        step = build_step(
            step_config,
            configuration.resources,
            _clients(custom_api, verbose),
            job_spec,
            artifact_dir,
            dry_logger,
            secret,
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task(f"{step.description()}...", total=None)
            step.run(threading.Event(), dry)
            progress.update(task, description="Step completed! ✅")

        console.print(f"✅ Successfully ran step: [bold green]{step.name()}[/bold green]")
        if dry:
            console.print(dry_logger.dump(), markup=False, highlight=False)

    except Exception as e:
        console.print(f"❌ Error running step: [red]{str(e)}[/red]")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
