"""
Framework detection for Storybook projects.

Classifies a project into one Framework value by probing well-known
manifest and configuration files. Detection is read-only and cached per
project root for the lifetime of the process, since a project's framework
does not change during a run.
"""

import json
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from storydocs.schemas import Framework

logger = logging.getLogger(__name__)


class FrameworkDetector:
    """
    Detect the UI framework convention of a Storybook project.

    Probe order:
    1. angular.json
    2. .storybook/main.{ts,js,mjs,cjs} ``framework`` field
    3. package.json dependencies (Storybook framework packages first,
       then core libraries)

    The first recognised signature wins; UNKNOWN otherwise.
    """

    STORYBOOK_MAIN_FILES = ['main.ts', 'main.js', 'main.mjs', 'main.cjs']

    # Storybook framework package prefixes -> framework
    STORYBOOK_FRAMEWORKS: List[Tuple[str, Framework]] = [
        ('@storybook/angular', Framework.ANGULAR),
        ('@storybook/vue', Framework.VUE),
        ('@storybook/svelte', Framework.VUE),
        ('@storybook/sveltekit', Framework.VUE),
        ('@storybook/web-components', Framework.WEB_COMPONENTS),
        ('@storybook/html', Framework.WEB_COMPONENTS),
        ('@storybook/react', Framework.REACT),
        ('@storybook/nextjs', Framework.REACT),
        ('@storybook/preact', Framework.REACT),
    ]

    # Core library dependencies -> framework, in priority order.
    # react comes last because Storybook itself pulls it into other projects.
    CORE_LIBRARIES: List[Tuple[str, Framework]] = [
        ('@angular/core', Framework.ANGULAR),
        ('vue', Framework.VUE),
        ('svelte', Framework.VUE),
        ('lit', Framework.WEB_COMPONENTS),
        ('lit-element', Framework.WEB_COMPONENTS),
        ('react', Framework.REACT),
    ]

    FRAMEWORK_FIELD = re.compile(
        r'framework\s*:\s*(?:\{\s*name\s*:\s*)?(?:getAbsolutePath\(\s*)?[\'"]([^\'"]+)[\'"]'
    )

    # Process-wide cache keyed by resolved project root
    _cache: Dict[str, Framework] = {}

    def detect(self, project_root: Path, use_cache: bool = True) -> Framework:
        """
        Detect the framework of a project.

        Args:
            project_root: Project root directory
            use_cache: Reuse an earlier result for the same root

        Returns:
            Detected Framework (UNKNOWN if nothing matched)

        Raises:
            ValueError: If project_root is None or empty
        """
        if project_root is None or str(project_root).strip() == '':
            raise ValueError("project_root is required")

        root = Path(project_root).resolve()
        key = str(root)

        if use_cache and key in self._cache:
            return self._cache[key]

        framework = self._detect_uncached(root)
        self._cache[key] = framework

        logger.info(f"Detected framework for {root}: {framework.value}")
        return framework

    def _detect_uncached(self, root: Path) -> Framework:
        for probe in (self._from_angular_json, self._from_storybook_main, self._from_package_json):
            framework = probe(root)
            if framework is not None:
                return framework
        return Framework.UNKNOWN

    def _from_angular_json(self, root: Path) -> Optional[Framework]:
        if (root / 'angular.json').is_file():
            logger.debug("Found angular.json")
            return Framework.ANGULAR
        return None

    def _from_storybook_main(self, root: Path) -> Optional[Framework]:
        for file_name in self.STORYBOOK_MAIN_FILES:
            main_file = root / '.storybook' / file_name
            if not main_file.is_file():
                continue

            try:
                content = main_file.read_text(encoding='utf-8', errors='ignore')
            except OSError as e:
                logger.debug(f"Could not read {main_file}: {e}")
                continue

            match = self.FRAMEWORK_FIELD.search(content)
            if match:
                framework = self._match_storybook_package([match.group(1)])
                if framework is not None:
                    logger.debug(f"Framework from {main_file.name}: {match.group(1)}")
                    return framework
        return None

    def _from_package_json(self, root: Path) -> Optional[Framework]:
        package_json = root / 'package.json'
        if not package_json.is_file():
            return None

        try:
            data = json.loads(package_json.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            logger.debug(f"Could not parse {package_json}: {e}")
            return None

        if not isinstance(data, dict):
            return None

        dependencies: Dict[str, str] = {}
        for section in ('dependencies', 'devDependencies', 'peerDependencies'):
            values = data.get(section)
            if isinstance(values, dict):
                dependencies.update(values)

        framework = self._match_storybook_package(dependencies)
        if framework is not None:
            return framework

        for package, framework in self.CORE_LIBRARIES:
            if package in dependencies:
                logger.debug(f"Framework from dependency: {package}")
                return framework
        return None

    def _match_storybook_package(self, packages: Iterable[str]) -> Optional[Framework]:
        packages = list(packages)
        for prefix, framework in self.STORYBOOK_FRAMEWORKS:
            for package in packages:
                if package == prefix or package.startswith(prefix + '-') or package.startswith(prefix + '/'):
                    return framework
                # vue3, vue3-vite, svelte-vite ...
                if package.startswith(prefix) and prefix in ('@storybook/vue', '@storybook/svelte'):
                    return framework
        return None

    @classmethod
    def clear_cache(cls):
        """Forget all cached detection results."""
        cls._cache.clear()


def detect_framework(project_root: Path, use_cache: bool = True) -> Framework:
    """
    Convenience function to detect a project's framework.

    Args:
        project_root: Project root directory
        use_cache: Reuse cached results for this root

    Returns:
        Detected Framework
    """
    return FrameworkDetector().detect(project_root, use_cache=use_cache)


def clear_framework_cache():
    """Reset the process-wide framework cache."""
    FrameworkDetector.clear_cache()
