"""docker buildx commands for publishing the generated image."""

BUILDER_NAME = "testcrate-builder"


def platform_flag(platforms: tuple[str, ...] | list[str]) -> str:
    return ",".join(platforms)


def image_reference(username: str, project_name: str, tag: str = "latest") -> str:
    return f"{username.strip()}/{project_name}:{tag}"


def build_commands(image: str, platforms: tuple[str, ...] | list[str]) -> list[list[str]]:
    """Commands that create a buildx builder, then build and push the image."""
    return [
        ["docker", "buildx", "create", "--name", BUILDER_NAME, "--use"],
        [
            "docker", "buildx", "build",
            "--platform", platform_flag(platforms),
            "-t", image,
            "--push", ".",
        ],
    ]
