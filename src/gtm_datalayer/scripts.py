"""In-page functions evaluated by :class:`~gtm_datalayer.client.DataLayerClient`.

Every script is a JavaScript function expression taking a single argument
object; engines are responsible for invoking it with that argument.
"""

GET_VARIABLE = """(args) => {
    const registry = window[args.registryName];
    const container = registry ? registry[args.containerId] : undefined;
    if (!container || !container.dataLayer) {
        return {found: false};
    }
    return {found: true, value: container.dataLayer.get(args.variable)};
}"""

# GTM's dataLayer.get() returns the whole merged model when handed an object
# whose split() yields no path segments.
GET_DATA_MODEL = """(args) => {
    const registry = window[args.registryName];
    const container = registry ? registry[args.containerId] : undefined;
    if (!container || !container.dataLayer) {
        return {found: false};
    }
    const model = container.dataLayer.get({
        split: function () {
            return [];
        },
    });
    return {found: true, value: model};
}"""

LIST_REGISTRY_KEYS = """(args) => {
    const registry = window[args.registryName];
    if (!registry) {
        return null;
    }
    const keys = [];
    for (const property in registry) {
        keys.push(property);
    }
    return keys;
}"""

GET_EVENTS = """(args) => {
    return window[args.dataLayerName].filter((msg) => msg != null && msg.event === args.event);
}"""

PUSH_MESSAGE = """(args) => {
    window[args.dataLayerName].push(args.message);
}"""

HAS_EVENT = """(args) => {
    const dataLayer = window[args.dataLayerName];
    return Array.isArray(dataLayer) && dataLayer.some((msg) => msg != null && msg.event === args.event);
}"""
