"""Materialises a SwiftUI Xcode project from translated Swift code."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from . import templates
from .archive import build_archive
from .identifiers import IdentifierSource, RandomIdentifierSource
from .pbxproj import ProjectGraph, Ref
from .structures import FileTree, ProjectDescriptor, ProjectOptions, TranslatedText

BUILD_PHASE_MASK = 2147483647

SHARED_BUILD_SETTINGS: Dict[str, object] = {
    "ALWAYS_SEARCH_USER_PATHS": "NO",
    "CLANG_ANALYZER_NONNULL": "YES",
    "CLANG_ANALYZER_NUMBER_OBJECT_CONVERSION": "YES_AGGRESSIVE",
    "CLANG_CXX_LANGUAGE_STANDARD": "gnu++14",
    "CLANG_CXX_LIBRARY": "libc++",
    "CLANG_ENABLE_MODULES": "YES",
    "CLANG_ENABLE_OBJC_ARC": "YES",
    "CLANG_ENABLE_OBJC_WEAK": "YES",
    "CLANG_WARN_BLOCK_CAPTURE_AUTORELEASING": "YES",
    "CLANG_WARN_BOOL_CONVERSION": "YES",
    "CLANG_WARN_COMMA": "YES",
    "CLANG_WARN_CONSTANT_CONVERSION": "YES",
    "CLANG_WARN_DEPRECATED_OBJC_IMPLEMENTATIONS": "YES",
    "CLANG_WARN_DIRECT_OBJC_ISA_USAGE": "YES_ERROR",
    "CLANG_WARN_DOCUMENTATION_COMMENTS": "YES",
    "CLANG_WARN_EMPTY_BODY": "YES",
    "CLANG_WARN_ENUM_CONVERSION": "YES",
    "CLANG_WARN_INFINITE_RECURSION": "YES",
    "CLANG_WARN_INT_CONVERSION": "YES",
    "CLANG_WARN_NON_LITERAL_NULL_CONVERSION": "YES",
    "CLANG_WARN_OBJC_IMPLICIT_RETAIN_SELF": "YES",
    "CLANG_WARN_OBJC_LITERAL_CONVERSION": "YES",
    "CLANG_WARN_OBJC_ROOT_CLASS": "YES_ERROR",
    "CLANG_WARN_QUOTED_INCLUDE_IN_FRAMEWORK_HEADER": "YES",
    "CLANG_WARN_RANGE_LOOP_ANALYSIS": "YES",
    "CLANG_WARN_STRICT_PROTOTYPES": "YES",
    "CLANG_WARN_SUSPICIOUS_MOVE": "YES",
    "CLANG_WARN_UNGUARDED_AVAILABILITY": "YES_AGGRESSIVE",
    "CLANG_WARN_UNREACHABLE_CODE": "YES",
    "CLANG_WARN__DUPLICATE_METHOD_MATCH": "YES",
    "COPY_PHASE_STRIP": "NO",
    "ENABLE_STRICT_OBJC_MSGSEND": "YES",
    "GCC_C_LANGUAGE_STANDARD": "gnu11",
    "GCC_NO_COMMON_BLOCKS": "YES",
    "GCC_WARN_64_TO_32_BIT_CONVERSION": "YES",
    "GCC_WARN_ABOUT_RETURN_TYPE": "YES_ERROR",
    "GCC_WARN_UNDECLARED_SELECTOR": "YES",
    "GCC_WARN_UNINITIALIZED_AUTOS": "YES_AGGRESSIVE",
    "GCC_WARN_UNUSED_FUNCTION": "YES",
    "GCC_WARN_UNUSED_VARIABLE": "YES",
    "MTL_FAST_MATH": "YES",
    "SDKROOT": "macosx",
}

DEBUG_BUILD_SETTINGS: Dict[str, object] = {
    "DEBUG_INFORMATION_FORMAT": "dwarf",
    "ENABLE_TESTABILITY": "YES",
    "GCC_DYNAMIC_NO_PIC": "NO",
    "GCC_OPTIMIZATION_LEVEL": 0,
    "GCC_PREPROCESSOR_DEFINITIONS": ["DEBUG=1", "$(inherited)"],
    "MTL_ENABLE_DEBUG_INFO": "INCLUDE_SOURCE",
    "ONLY_ACTIVE_ARCH": "YES",
    "SWIFT_ACTIVE_COMPILATION_CONDITIONS": "DEBUG",
    "SWIFT_OPTIMIZATION_LEVEL": "-Onone",
}

RELEASE_BUILD_SETTINGS: Dict[str, object] = {
    "DEBUG_INFORMATION_FORMAT": "dwarf-with-dsym",
    "ENABLE_NS_ASSERTIONS": "NO",
    "MTL_ENABLE_DEBUG_INFO": "NO",
    "SWIFT_COMPILATION_MODE": "wholemodule",
    "SWIFT_OPTIMIZATION_LEVEL": "-O",
}


@dataclass
class GeneratedProject:
    """Result of building a project: its pbxproj graph and file tree."""

    descriptor: ProjectDescriptor
    graph: ProjectGraph
    target: Ref
    files: FileTree

    @property
    def identifiers(self) -> List[str]:
        return list(self.graph.objects)


def _project_settings(options: ProjectOptions, variant: Dict[str, object]) -> Dict[str, object]:
    settings = {**SHARED_BUILD_SETTINGS, **variant}
    settings["MACOSX_DEPLOYMENT_TARGET"] = options.minimum_system_version
    return dict(sorted(settings.items()))


def _target_settings(project_name: str, options: ProjectOptions) -> Dict[str, object]:
    return {
        "ASSETCATALOG_COMPILER_APPICON_NAME": "AppIcon",
        "ASSETCATALOG_COMPILER_GLOBAL_ACCENT_COLOR_NAME": "AccentColor",
        "CODE_SIGN_STYLE": "Automatic",
        "COMBINE_HIDPI_IMAGES": "YES",
        "ENABLE_PREVIEWS": "YES",
        "INFOPLIST_FILE": f"{project_name}/Info.plist",
        "LD_RUNPATH_SEARCH_PATHS": "$(inherited) @executable_path/../Frameworks",
        "PRODUCT_BUNDLE_IDENTIFIER": options.bundle_identifier(project_name),
        "PRODUCT_NAME": "$(TARGET_NAME)",
        "SWIFT_VERSION": "5.0",
    }


def build_graph(
    project_name: str,
    identifiers: IdentifierSource,
    options: ProjectOptions,
) -> tuple[ProjectGraph, Ref]:
    """Declare every pbxproj object and return the graph and target reference."""

    graph = ProjectGraph()
    new_id = identifiers.next_identifier
    app_file_name = f"{project_name}App.swift"
    product_name = f"{project_name}.app"

    # File references
    product = graph.add(
        new_id(),
        "PBXFileReference",
        comment=product_name,
        inline=True,
        explicitFileType="wrapper.application",
        includeInIndex=0,
        path=product_name,
        sourceTree="BUILT_PRODUCTS_DIR",
    )
    app_file = graph.add(
        new_id(),
        "PBXFileReference",
        comment=app_file_name,
        inline=True,
        lastKnownFileType="sourcecode.swift",
        path=app_file_name,
        sourceTree="<group>",
    )
    content_view_file = graph.add(
        new_id(),
        "PBXFileReference",
        comment="ContentView.swift",
        inline=True,
        lastKnownFileType="sourcecode.swift",
        path="ContentView.swift",
        sourceTree="<group>",
    )
    assets_file = graph.add(
        new_id(),
        "PBXFileReference",
        comment="Assets.xcassets",
        inline=True,
        lastKnownFileType="folder.assetcatalog",
        path="Assets.xcassets",
        sourceTree="<group>",
    )
    info_plist_file = graph.add(
        new_id(),
        "PBXFileReference",
        comment="Info.plist",
        inline=True,
        lastKnownFileType="text.plist.xml",
        path="Info.plist",
        sourceTree="<group>",
    )

    # Build files
    app_build = graph.add(
        new_id(),
        "PBXBuildFile",
        comment=f"{app_file_name} in Sources",
        inline=True,
        fileRef=app_file,
    )
    content_view_build = graph.add(
        new_id(),
        "PBXBuildFile",
        comment="ContentView.swift in Sources",
        inline=True,
        fileRef=content_view_file,
    )
    assets_build = graph.add(
        new_id(),
        "PBXBuildFile",
        comment="Assets.xcassets in Resources",
        inline=True,
        fileRef=assets_file,
    )

    # Build phases
    sources_phase = graph.add(
        new_id(),
        "PBXSourcesBuildPhase",
        comment="Sources",
        buildActionMask=BUILD_PHASE_MASK,
        files=[content_view_build, app_build],
        runOnlyForDeploymentPostprocessing=0,
    )
    frameworks_phase = graph.add(
        new_id(),
        "PBXFrameworksBuildPhase",
        comment="Frameworks",
        buildActionMask=BUILD_PHASE_MASK,
        files=[],
        runOnlyForDeploymentPostprocessing=0,
    )
    resources_phase = graph.add(
        new_id(),
        "PBXResourcesBuildPhase",
        comment="Resources",
        buildActionMask=BUILD_PHASE_MASK,
        files=[assets_build],
        runOnlyForDeploymentPostprocessing=0,
    )

    # Groups
    sources_group = graph.add(
        new_id(),
        "PBXGroup",
        comment=project_name,
        children=[app_file, content_view_file, assets_file, info_plist_file],
        path=project_name,
        sourceTree="<group>",
    )
    products_group = graph.add(
        new_id(),
        "PBXGroup",
        comment="Products",
        children=[product],
        name="Products",
        sourceTree="<group>",
    )
    frameworks_group = graph.add(
        new_id(),
        "PBXGroup",
        comment="Frameworks",
        children=[],
        name="Frameworks",
        sourceTree="<group>",
    )
    main_group = graph.add(
        new_id(),
        "PBXGroup",
        children=[sources_group, products_group, frameworks_group],
        sourceTree="<group>",
    )

    # Build configurations
    project_debug = graph.add(
        new_id(),
        "XCBuildConfiguration",
        comment="Debug",
        buildSettings=_project_settings(options, DEBUG_BUILD_SETTINGS),
        name="Debug",
    )
    project_release = graph.add(
        new_id(),
        "XCBuildConfiguration",
        comment="Release",
        buildSettings=_project_settings(options, RELEASE_BUILD_SETTINGS),
        name="Release",
    )
    target_debug = graph.add(
        new_id(),
        "XCBuildConfiguration",
        comment="Debug",
        buildSettings=_target_settings(project_name, options),
        name="Debug",
    )
    target_release = graph.add(
        new_id(),
        "XCBuildConfiguration",
        comment="Release",
        buildSettings=_target_settings(project_name, options),
        name="Release",
    )
    project_configurations = graph.add(
        new_id(),
        "XCConfigurationList",
        comment=f'Build configuration list for PBXProject "{project_name}"',
        buildConfigurations=[project_debug, project_release],
        defaultConfigurationIsVisible=0,
        defaultConfigurationName="Release",
    )
    target_configurations = graph.add(
        new_id(),
        "XCConfigurationList",
        comment=f'Build configuration list for PBXNativeTarget "{project_name}"',
        buildConfigurations=[target_debug, target_release],
        defaultConfigurationIsVisible=0,
        defaultConfigurationName="Release",
    )

    target = graph.add(
        new_id(),
        "PBXNativeTarget",
        comment=project_name,
        buildConfigurationList=target_configurations,
        buildPhases=[sources_phase, frameworks_phase, resources_phase],
        buildRules=[],
        dependencies=[],
        name=project_name,
        productName=project_name,
        productReference=product,
        productType="com.apple.product-type.application",
    )

    project = graph.add(
        new_id(),
        "PBXProject",
        comment="Project object",
        attributes={
            "LastUpgradeCheck": int(templates.LAST_UPGRADE_VERSION),
            "ORGANIZATIONNAME": "",
            "TargetAttributes": {
                Ref(target.object_id): {"CreatedOnToolsVersion": "12.5"},
            },
        },
        buildConfigurationList=project_configurations,
        compatibilityVersion="Xcode 9.3",
        developmentRegion="en",
        hasScannedForEncodings=0,
        knownRegions=["en", "Base"],
        mainGroup=main_group,
        productRefGroup=products_group,
        projectDirPath="",
        projectRoot="",
        targets=[target],
    )
    graph.set_root(project)
    return graph, target


def build_project(
    descriptor: ProjectDescriptor,
    *,
    identifiers: Optional[IdentifierSource] = None,
    options: Optional[ProjectOptions] = None,
) -> GeneratedProject:
    """Build the pbxproj graph and the complete file tree for a project."""

    identifiers = identifiers or RandomIdentifierSource()
    options = options or ProjectOptions()
    name = descriptor.project_name

    graph, target = build_graph(name, identifiers, options)
    xcodeproj = f"{name}.xcodeproj"
    user_dir = f"{options.user_name}.xcuserdatad"
    assets = f"{name}/Assets.xcassets"

    files: FileTree = {
        f"{xcodeproj}/project.pbxproj": graph.render(),
        f"{xcodeproj}/xcshareddata/xcschemes/{name}.xcscheme": templates.scheme(name, target.object_id),
        f"{xcodeproj}/project.xcworkspace/contents.xcworkspacedata": templates.workspace_contents(name),
        f"{xcodeproj}/project.xcworkspace/xcshareddata/swiftpm/configuration": "",
        f"{xcodeproj}/xcuserdata/{user_dir}/xcschemes/xcschememanagement.plist": templates.scheme_management(name),
        f"{xcodeproj}/project.xcworkspace/xcuserdata/{user_dir}/UserInterfaceState.xcuserstate": "",
        f"{name}/{name}App.swift": templates.app_entry_point(name),
        f"{name}/ContentView.swift": templates.content_view(descriptor.translated_body),
        f"{name}/Info.plist": templates.info_plist(name, options),
        f"{assets}/Contents.json": templates.asset_catalog(),
        f"{assets}/AccentColor.colorset/Contents.json": templates.accent_color(),
        f"{assets}/AppIcon.appiconset/Contents.json": templates.app_icon(),
        f"{name}/Preview Content/Preview Assets.xcassets/Contents.json": templates.asset_catalog(),
    }
    return GeneratedProject(descriptor=descriptor, graph=graph, target=target, files=files)


def build_file_tree(
    project_name: str,
    translated_body: TranslatedText,
    *,
    identifiers: Optional[IdentifierSource] = None,
    options: Optional[ProjectOptions] = None,
) -> FileTree:
    descriptor = ProjectDescriptor(project_name=project_name, translated_body=translated_body)
    return build_project(descriptor, identifiers=identifiers, options=options).files


def materialize(
    project_name: str,
    translated_body: TranslatedText,
    *,
    identifiers: Optional[IdentifierSource] = None,
    options: Optional[ProjectOptions] = None,
) -> bytes:
    """Return a zip archive containing a buildable Xcode project."""

    files = build_file_tree(
        project_name,
        translated_body,
        identifiers=identifiers,
        options=options,
    )
    return build_archive(files)
