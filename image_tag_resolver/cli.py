#!/usr/bin/env python3

"""
Image Tag Resolver CLI

Resolves the image tag for a repository reference and threads it through
the publish plan, an optional values file and an optional GitHub deployment.
"""

import logging
import os
import sys

from .deployment import DeploymentPayload, create_deployment
from .environment import EnvironmentConfig
from .exceptions import TagResolutionError, DeploymentError, GitOperationError
from .git_operations import GitCheckout, setup_github_client
from .models import ExecutionResult, PublishPlan
from .plan_builder import prepare_plan
from .utils import setup_logging, write_github_output, print_plan_summary
from .values_file import application_tag_path, update_values_file


def build_payload(config: EnvironmentConfig, plan: PublishPlan) -> DeploymentPayload:
    """Deployment payload describing the first planned image."""
    image = plan.images[0]
    return DeploymentPayload(
        repository=config.repository,
        docker_image_tag=plan.tag,
        application=config.application,
        stack=config.stack,
        project=config.project,
        cluster=config.cluster,
        docker_image=image.image,
        dockerfile=image.dockerfile,
        docker_namespace=image.namespace,
        run_id=int(config.run_id or 0),
    )


def run(config: EnvironmentConfig, checkout) -> ExecutionResult:
    """Run the pipeline for a validated configuration."""
    result = ExecutionResult(success=True, dry_run=config.dry_run)

    plan = prepare_plan(config.publish_config(), checkout)
    result.tag = plan.tag
    result.image_references = plan.get_references()
    print_plan_summary(plan, config.dry_run)

    if config.values_file:
        result.values_file_updated = update_values_file(
            config.values_file,
            application_tag_path(config.application),
            plan.tag,
            dry_run=config.dry_run,
        )
        if result.values_file_updated is None:
            result.success = False
            result.errors.append(f"Values file not found: {config.values_file}")

    if config.create_deployment and result.success:
        payload = build_payload(config, plan)
        if config.dry_run:
            print(f"[DRY RUN] Would create deployment of {config.ref} to {config.deployment_environment}")
            print(f"[DRY RUN] Payload: {payload.to_dict()}")
        else:
            _, github_repo = setup_github_client(config.github_token, config.repository)
            result.deployment_id = create_deployment(
                github_repo, config.ref, payload, config.deployment_environment
            )

    if config.github_output and result.success:
        outputs = {"image_tag": plan.tag, "images": ",".join(result.image_references)}
        if result.deployment_id is not None:
            outputs["deployment_id"] = str(result.deployment_id)
        write_github_output(config.github_output, outputs)

    return result


def main():
    """Main entry point - parse, validate, resolve, publish."""
    try:
        # Step 1: Parse environment
        config = EnvironmentConfig.from_env(os.environ)

        # Step 2: Validate configuration
        errors = config.validate()
        if errors:
            for error in errors:
                print(f"Error: {error}")
            sys.exit(1)

        setup_logging(getattr(logging, config.log_level))

        print(f"Repository: {config.repository}")
        print(f"Reference: {config.ref}")
        print(f"Dry run: {config.dry_run}")

        # Step 3: Resolve and run with private working copies
        with GitCheckout() as checkout:
            result = run(config, checkout)

        if not result.success:
            for error in result.errors:
                print(f"Error: {error}")
            sys.exit(1)

        if result.deployment_id is not None:
            print(f"Created deployment: {result.deployment_id}")
        print(f"Resolved image tag: {result.tag}")
    except (TagResolutionError, DeploymentError, GitOperationError) as e:
        print(f"Error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
