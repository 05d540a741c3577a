"""Facade for running the tracefn source transformation."""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from tracefn_core.models import (
    BuildResult,
    BuildTask,
    Profile,
    TraceFnConfig,
    TransformResult,
)
from tracefn_core.transform.scanner import transform_source


class TraceFn:
    """Static facade for transforming sources with function instrumentation.

    Example
    -------
    Transform a string of source code:
    >>> result = TraceFn.transform(source, filename='calc.py')
    >>> print(result.source)

    Build a source tree into another directory for release:
    >>> results = TraceFn.build(TraceFn.collect_tasks(['src'], 'build'), profile='release')
    """

    _config: Optional[TraceFnConfig] = None

    def __new__(cls):
        """Prevent instantiation of this static class."""
        raise TypeError(f'{cls.__name__} is a static class and cannot be instantiated')

    @classmethod
    def config(cls) -> TraceFnConfig:
        """Get the tracefn configuration.

        Returns
        -------
        TraceFnConfig
            The configuration, loaded from the environment on first use
        """
        if cls._config is None:
            cls._config = TraceFnConfig()
        return cls._config

    @classmethod
    def configure(cls, config: Optional[TraceFnConfig]) -> None:
        """Use the given configuration. Pass None to reload it from the environment."""
        cls._config = config

    @classmethod
    def transform(
        cls,
        source: str,
        filename: str = '<string>',
        profile: Optional[Union[Profile, str]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> TransformResult:
        """Transform the source of a single module.

        Parameters
        ----------
        source : str
            The module source
        filename : str, optional
            Name reported in entry events, by default "<string>"
        profile : Profile | str, optional
            Build profile. If None, uses the configured profile
        logger : logging.Logger, optional
            Receives the per-function decisions

        Returns
        -------
        TransformResult
            The rewritten source and one record per marked function
        """
        config = cls.config()
        profile = Profile(profile) if profile is not None else config.profile

        return transform_source(
            source,
            filename=filename,
            instrumented=profile == Profile.DEBUG,
            marker=config.marker,
            opaque_types=config.opaque_types,
            logger=logger,
        )

    @classmethod
    def transform_file(
        cls,
        task: Union[BuildTask, str, Path],
        profile: Optional[Union[Profile, str]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> TransformResult:
        """Transform a file, writing the result when the task has a target.

        Parameters
        ----------
        task : BuildTask | str | Path
            The file to transform, optionally with its destination
        profile : Profile | str, optional
            Build profile. If None, uses the configured profile
        logger : logging.Logger, optional
            Receives the per-function decisions

        Returns
        -------
        TransformResult
            The transformed module

        Raises
        ------
        FileNotFoundError
            If the source file doesn't exist
        SourceParseException
            If the file is not valid Python
        GenerationException
            If a marked function cannot be generated
        """
        if not isinstance(task, BuildTask):
            task = BuildTask(source=Path(task))

        source = task.source.read_text(encoding='utf-8')
        result = cls.transform(
            source, filename=str(task.source), profile=profile, logger=logger
        )

        if task.target is not None:
            task.target.parent.mkdir(parents=True, exist_ok=True)
            task.target.write_text(result.source, encoding='utf-8')

        return result

    @staticmethod
    def collect_tasks(
        paths: Iterable[Union[str, Path]],
        output_dir: Optional[Union[str, Path]] = None,
    ) -> List[BuildTask]:
        """Expand files and directories into build tasks.

        Directories are searched recursively for `.py` files. With an output
        directory, files found in a directory keep their path relative to it
        and files given directly are placed at the top of the output.

        Parameters
        ----------
        paths : Iterable[str | Path]
            Files and directories to transform
        output_dir : str | Path, optional
            Where to write the results. If None, tasks have no target

        Returns
        -------
        List[BuildTask]
        """
        output = Path(output_dir) if output_dir is not None else None
        tasks: List[BuildTask] = []

        for path in map(Path, paths):
            if path.is_dir():
                for file in sorted(path.rglob('*.py')):
                    target = output / file.relative_to(path) if output else None
                    tasks.append(BuildTask(source=file, target=target))
            else:
                target = output / path.name if output else None
                tasks.append(BuildTask(source=path, target=target))

        return tasks

    @classmethod
    def build_iter(
        cls,
        tasks: List[Union[BuildTask, str, Path]],
        profile: Optional[Union[Profile, str]] = None,
        workers: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ) -> Iterator[BuildResult]:
        """Transform multiple files in parallel, yielding results as they complete.

        Each file is transformed independently of the others, so the work is
        spread over a thread pool without further synchronization.

        Parameters
        ----------
        tasks : List[BuildTask | str | Path]
            Files to transform, optionally with a destination
        profile : Profile | str, optional
            Build profile. If None, uses the configured profile
        workers : int, optional
            Number of parallel workers. Defaults to the configured value or CPU count
        logger : logging.Logger, optional
            Receives the per-function decisions

        Yields
        ------
        BuildResult
            Results as they complete, with the transformed module or the error

        Example
        -------
        >>> for result in TraceFn.build_iter(TraceFn.collect_tasks(['src'], 'build')):
        ...     if result.failed:
        ...         print(f'{result.task.source} failed: {result.error}')
        """
        # Load the configuration once, before the workers read it
        config = cls.config()

        max_workers = workers or config.workers or (os.cpu_count() or 2)

        normalized_tasks: List[BuildTask] = [
            task if isinstance(task, BuildTask) else BuildTask(source=Path(task))
            for task in tasks
        ]

        def process_task(task: BuildTask) -> BuildResult:
            try:
                result = cls.transform_file(task, profile=profile, logger=logger)
                return BuildResult(task=task, result=result, error=None)
            except Exception as e:
                return BuildResult(task=task, result=None, error=str(e), exception=e)

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(process_task, task) for task in normalized_tasks]

            for future in as_completed(futures):
                yield future.result()

    @classmethod
    def build(
        cls,
        tasks: List[Union[BuildTask, str, Path]],
        profile: Optional[Union[Profile, str]] = None,
        workers: Optional[int] = None,
        stop_on_error: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> List[BuildResult]:
        """Transform multiple files in parallel.

        For streaming results as they complete, use build_iter() instead.

        Parameters
        ----------
        tasks : List[BuildTask | str | Path]
            Files to transform, optionally with a destination
        profile : Profile | str, optional
            Build profile. If None, uses the configured profile
        workers : int, optional
            Number of parallel workers
        stop_on_error : bool, optional
            If True, stop collecting results at the first failure, by default False
        logger : logging.Logger, optional
            Receives the per-function decisions

        Returns
        -------
        List[BuildResult]
            Results in completion order
        """
        results: List[BuildResult] = []

        for result in cls.build_iter(
            tasks=tasks, profile=profile, workers=workers, logger=logger
        ):
            results.append(result)

            if stop_on_error and result.failed:
                break

        return results
