'''
Story executor: summarize one story, format the chat message, post it.
Failures are logged and contained to the story being processed.
'''

import structlog

from newsdigest.fetchers.rss import Story
from newsdigest.notifier import Notifier, NotifyError
from newsdigest.summarizer import Summarizer, SummarizeError

MESSAGE_TEMPLATE = '*Title:* {title}\n> {summary}'


def summary_input(story: Story) -> str:
    '''Text sent for summarization: title and link.'''
    return f'{story.title} - {story.link}'


def format_message(story: Story, summary: str) -> str:
    '''Chat message for a story and its summary.'''
    return MESSAGE_TEMPLATE.format(title=story.title, summary=summary)


def process_story(story: Story, summarizer: Summarizer, notifier: Notifier) -> bool:
    '''
    Summarize story and post the result. No retries.
    Returns True if the message was delivered.
    '''
    log = structlog.get_logger().bind(title=story.title)

    try:
        summary = summarizer.summarize(summary_input(story))
    except SummarizeError as e:
        log.error('error summarizing story', error=str(e), error_type=type(e).__name__)
        return False

    try:
        notifier.notify(format_message(story, summary))
    except NotifyError as e:
        log.error('error posting story', error=str(e), status_code=e.status_code)
        return False

    log.info('story posted')
    return True
