"""Fixed-content files of a generated SwiftUI project."""

from __future__ import annotations

import html
import json
import plistlib
from typing import Any, Dict

from .structures import ProjectOptions

XCODE_INFO = {"author": "xcode", "version": 1}
LAST_UPGRADE_VERSION = "1250"


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def _plist(payload: Dict[str, Any]) -> str:
    return plistlib.dumps(payload, fmt=plistlib.FMT_XML).decode("utf-8")


def _asset_json(payload: Dict[str, Any]) -> str:
    # Xcode writes asset catalogs with a space before each colon.
    return json.dumps(payload, indent=2, separators=(",", " : "))


def info_plist(project_name: str, options: ProjectOptions) -> str:
    """Application metadata for the generated target."""

    return _plist(
        {
            "CFBundleDevelopmentRegion": "en",
            "CFBundleExecutable": project_name,
            "CFBundleIdentifier": options.bundle_identifier(project_name),
            "CFBundleInfoDictionaryVersion": "6.0",
            "CFBundleName": project_name,
            "CFBundlePackageType": "APPL",
            "CFBundleShortVersionString": options.version,
            "CFBundleVersion": options.build,
            "LSMinimumSystemVersion": options.minimum_system_version,
        }
    )


def scheme(project_name: str, blueprint_identifier: str) -> str:
    """Shared scheme that builds the application target.

    ``blueprint_identifier`` is the native target's own identifier, freshly
    generated for each project, so the scheme resolves to that target.
    """

    name = _attr(project_name)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<Scheme LastUpgradeVersion="{LAST_UPGRADE_VERSION}" version="1.3">\n'
        '   <BuildAction parallelizeBuildables="YES" buildImplicitDependencies="YES">\n'
        "      <BuildActionEntries>\n"
        '         <BuildActionEntry buildForTesting="YES" buildForRunning="YES" '
        'buildForProfiling="YES" buildForArchiving="YES" buildForAnalyzing="YES">\n'
        '            <BuildableReference BuildableIdentifier="primary" '
        f'BlueprintIdentifier="{_attr(blueprint_identifier)}" '
        f'BuildableName="{name}.app" BlueprintName="{name}" '
        f'ReferencedContainer="container:{name}.xcodeproj"></BuildableReference>\n'
        "         </BuildActionEntry>\n"
        "      </BuildActionEntries>\n"
        "   </BuildAction>\n"
        "</Scheme>"
    )


def scheme_management(project_name: str) -> str:
    return _plist(
        {
            "SchemeUserState": {
                f"{project_name}.xcscheme_^#shared#^_": {"orderHint": 0},
            }
        }
    )


def workspace_contents(project_name: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<Workspace version="1.0">\n'
        f'    <FileRef location="self:{_attr(project_name)}.xcodeproj"></FileRef>\n'
        "</Workspace>"
    )


def app_entry_point(project_name: str) -> str:
    return (
        "import SwiftUI\n"
        "\n"
        "@main\n"
        f"struct {project_name}App: App {{\n"
        "    var body: some Scene {\n"
        "        WindowGroup {\n"
        "            ContentView()\n"
        "        }\n"
        "    }\n"
        "}"
    )


def content_view(translated_body: str) -> str:
    return "import SwiftUI\n\n" + translated_body


def asset_catalog() -> str:
    return _asset_json({"info": XCODE_INFO})


def accent_color() -> str:
    return _asset_json({"colors": [{"idiom": "universal"}], "info": XCODE_INFO})


def app_icon() -> str:
    return _asset_json(
        {
            "images": [
                {"idiom": "universal", "platform": "ios", "size": "1024x1024"},
            ],
            "info": XCODE_INFO,
        }
    )
