# SPDX-FileCopyrightText: 2022 - 2023 Peter Urban, Ghent University
#
# SPDX-License-Identifier: MPL-2.0

from tqdm.auto import tqdm

from typing import Any, Callable, Iterable, Optional, Type, Union

ProgressLike = Optional[Union[bool, Type[Callable[..., Any]]]]


def get_progress_iterator(
    iterable: Iterable[Any],
    progress: ProgressLike = False,
    **kwargs: Any) -> Iterable[Any]:
    """
    Wrap an iterable in a progress bar if requested.

    Tile fetches report their progress through this while the pending
    downloads are awaited one by one.

    Args:
        iterable: The iterable to iterate over (e.g. asyncio.as_completed(...)).
        progress: If True, use tqdm.
                  If a class/callable is given, it is called as progress(iterable, **kwargs).
                  If False or None, the iterable is returned unchanged.
        **kwargs: Forwarded to the progress bar (e.g. total, desc, unit).

    Returns:
        The (possibly wrapped) iterable.
    """
    if progress is None or progress is False:
        return iterable

    if progress is True:
        progress = tqdm

    # only show bars for fetches that take a while
    kwargs.setdefault("delay", 2)
    return progress(iterable, **kwargs)
