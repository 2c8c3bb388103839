from thinc.api import Config
import vine_filter
import falcon

if __name__ in ('__main__', 'example_filter_service_EN'):

    FILTER_CONFIG = """
[filters]

[filters.peppers]

[filters.peppers.produce]
type = "target_word_in_grammar_dependency"
target_words = ["green bell pepper","red bell pepper","jalapeno pepper"]
field = "governor"

[filters.cooking]

[filters.cooking.action]
type = "tag_in_grammar_dependency"
tags = ["VB","VBD","VBG","VBZ","VBP"]
relations = ["dobj"]
field = "governor"

[filters.cooking.topic]
type = "strict_string"
words = ["cooking","recipe","dinner"]
field = "scrubbed_text"
"""

    manager = vine_filter.Manager()
    manager.register_filters_from_config(Config().from_str(FILTER_CONFIG))

    # Uncomment the following line to evaluate vine documents typed at an interactive console
    # manager.start_console()

    # The following code starts a RESTful Http service that evaluates the filters above against
    # vine documents posted as JSON. It is deployed as a WSGI application. An example of how to
    # start it - issued from the directory that contains the script - is

    # waitress-serve example_filter_service_EN:application

    class FilterResource():
        def on_post(self, req, resp):
            vine = manager.parse_vine(req.get_media())
            if vine is None:
                raise falcon.HTTPBadRequest(
                    title='Invalid vine',
                    description='The document does not describe a valid vine.')
            resp.media = {'id': vine.id, 'good_filters': manager.evaluate(vine)}

    application = falcon.App()
    application.add_route('/vines', FilterResource())
