"""Keyword tables for the topic, locale and relevance heuristics.

Table format:
- Every table is a tuple of regex fragments written against `normalize`d text
  (lowercase, no diacritics). Fragments may use small regex constructs
  (`s?`, `(?:e|es)?`, `\\s+`) but never anchors; word boundaries are added by
  `compile_terms`.
- Tables are data only. Predicates live in `topic_classifier`,
  `locale_router` and `retrieval.scoring`.

Extension:
- Adding a word to a category means adding one fragment to one table; no
  control flow changes are needed.
"""

import re


def compile_terms(terms) -> re.Pattern:
    """Compile a table into one alternation bounded by non-alphanumerics.

    Lookarounds are used instead of `\\b` so that fragments starting or ending
    with symbols (`€`, `+`, `$`) still match.
    """
    body = "|".join(f"(?:{t})" for t in terms)
    return re.compile(rf"(?<![a-z0-9])(?:{body})(?![a-z0-9])")


# =========================================================
# PRICE / COST
# =========================================================

PRICE_TERMS = (
    r"prix", r"combien", r"cb", r"cout(?:e|ent|er|era|ait)?", r"couts?",
    r"tarifs?", r"tarification", r"abonnements?", r"abos?",
    r"forfaits?", r"facture", r"payer", r"paye", r"frais",
    r"moins cher", r"pas cher", r"price", r"pricing", r"cost",
    r"how much", r"subscription",
)

CURRENCY_TERMS = (
    r"€", r"euros?", r"eur", r"\$", r"dollars?", r"usd", r"£", r"livres? sterling",
    r"chf", r"/\s*mois", r"par mois", r"mensuel(?:le)?", r"par an", r"annuel(?:le)?",
    r"per month", r"monthly", r"a month", r"/\s*month", r"per year",
    r"abonnements?", r"subscriptions?", r"forfaits?", r"tarifs?", r"prix", r"price",
)


# =========================================================
# PRODUCTS / SERVICES / BRANDS
# =========================================================

GLOBAL_BRAND_TERMS = (
    r"netflix", r"spotify", r"amazon", r"prime video", r"amazon prime",
    r"disney\s*\+?", r"disney plus", r"apple", r"apple tv\s*\+?", r"apple music",
    r"icloud", r"iphone(?: \d+)?", r"ipad", r"macbook", r"airpods",
    r"youtube(?: premium)?", r"chatgpt(?: plus)?", r"microsoft", r"office 365",
    r"xbox(?: game pass)?", r"game pass", r"playstation(?: plus)?", r"ps5", r"ps plus",
    r"nintendo(?: switch)?", r"switch 2", r"uber(?: eats)?", r"airbnb", r"tesla",
    r"google one", r"samsung", r"galaxy s\d+", r"deezer", r"canva", r"adobe",
    r"linkedin premium", r"tinder", r"hbo", r"paramount\s*\+?",
)

DOMESTIC_BRAND_TERMS = (
    r"canal\s*\+", r"canal plus", r"molotov", r"free(?: mobile)?", r"freebox",
    r"orange", r"livebox", r"sfr", r"bouygues(?: telecom)?", r"bbox", r"sosh",
    r"red by sfr", r"b&you", r"fnac", r"darty", r"boulanger", r"carrefour",
    r"leclerc", r"auchan", r"intermarche", r"lidl", r"decathlon", r"ikea",
    r"sncf", r"ouigo", r"tgv", r"navigo", r"ratp", r"la poste", r"edf", r"engie",
    r"totalenergies", r"blablacar", r"doctolib", r"cdiscount", r"vinted",
    r"leboncoin", r"dazn", r"bein(?: sports)?", r"rmc sport",
)

# Generic words ("application", "plateforme") are not product cues on their own.
PRODUCT_TERMS = GLOBAL_BRAND_TERMS + DOMESTIC_BRAND_TERMS + (
    r"smartphone", r"telephone portable", r"forfait mobile", r"box internet",
    r"console", r"ordinateur portable", r"television", r"casque",
)


# =========================================================
# PEOPLE IN ROLE
# =========================================================

PERSON_ROLE_TERMS = (
    r"president(?:e)?", r"premier(?:e)? ministre", r"ministres?", r"chef de l'etat",
    r"chef du gouvernement", r"pdg", r"ceo", r"directeur general", r"directrice generale",
    r"dirigeant(?:e)?s?", r"patron(?:ne)?", r"rois?", r"reines?", r"monarque",
    r"pape", r"maire", r"chancelier(?:e)?", r"gouverneur", r"secretaire general(?:e)?",
    r"porte-parole", r"entraineur", r"selectionneur", r"head coach", r"capitaine",
    r"president of", r"prime minister", r"king", r"queen", r"mayor",
)


# =========================================================
# LAW / POLITICS
# =========================================================

LAW_TERMS = (
    r"lois?", r"decrets?", r"reformes?", r"projet de loi", r"proposition de loi",
    r"texte de loi", r"amendements?", r"legislation", r"legislatif", r"reglementation",
    r"ordonnance", r"article 49\.?3", r"49\.?3", r"code du travail", r"code civil",
    r"constitution", r"referendum",
)

RECENCY_TERMS = (
    r"dernier(?:e)?s?", r"recent(?:e)?s?", r"recemment", r"nouveau", r"nouvel(?:le)?s?",
    r"nouveaux", r"actuel(?:le)?s?", r"actuellement", r"en ce moment",
    r"aujourd'?hui", r"hier", r"cette semaine", r"ce mois(?:-ci)?", r"cette annee",
    r"vient d'etre", r"viens d'etre", r"vote(?:e|es|s)? (?:hier|cette)",
    r"en vigueur", r"a partir de", r"depuis le",
)

GOVERNMENT_TERMS = (
    r"gouvernement", r"assemblee(?: nationale)?", r"senat", r"parlement",
    r"deputes?", r"senateurs?", r"elysee", r"matignon", r"conseil constitutionnel",
    r"conseil d'etat", r"journal officiel", r"france", r"francais(?:e|es)?",
    r"ministere", r"ministres?", r"macron", r"etat",
)

POLITICS_TERMS = (
    r"politiques?", r"elections?", r"electora(?:l|ux)", r"presidentielle",
    r"legislatives", r"municipales", r"europeennes", r"scrutin", r"sondages?",
    r"gouvernement", r"partis?", r"deputes?", r"senat", r"assemblee nationale",
    r"manifestations?", r"greves?", r"motion de censure", r"dissolution",
    r"remaniement", r"government", r"parliament", r"vote",
)

CRISIS_TERMS = (
    r"guerres?", r"conflits?", r"crises?", r"attentats?", r"invasion",
    r"cessez-le-feu", r"sanctions", r"scandales?", r"emeutes?",
    r"catastrophe", r"seisme", r"tremblement de terre", r"inondations?",
    r"ukraine", r"gaza", r"israel", r"war",
)


# =========================================================
# CURRENT AFFAIRS
# =========================================================

RESULT_TERMS = (
    r"resultats?", r"scores?", r"classement", r"vainqueur", r"gagnant(?:e)?",
    r"qui a gagne", r"qui a remporte", r"a gagne", r"remporte", r"palmares",
    r"finale", r"qualifie(?:e)?s?", r"elimine(?:e)?s?", r"who won", r"results?",
)

LAST_EVENT_TERMS = (
    r"dernier (?:match|combat|episode|album|film|tournoi|grand prix|gp)",
    r"derniere (?:saison|course|rencontre|edition|etape|sortie)",
    r"prochain (?:match|combat|episode|album|tournoi|grand prix)",
    r"prochaine (?:saison|course|rencontre|edition)",
    r"last (?:match|fight|game|episode|season)",
)

WEATHER_TERMS = (
    r"meteo", r"temperatures?", r"pluie", r"neige", r"canicule", r"tempetes?",
    r"orages?", r"previsions?", r"vigilance (?:orange|rouge)", r"weather", r"forecast",
)

MACRO_TERMS = (
    r"inflation", r"chomage", r"taux directeur", r"taux d'interet", r"taux du livret a",
    r"livret a", r"pib", r"croissance economique", r"recession", r"smic",
    r"cours de l'or", r"cours du petrole", r"bourse", r"cac ?40", r"dow jones",
    r"nasdaq", r"taux de change", r"dette publique", r"deficit", r"prix de l'essence",
    r"prix du carburant",
)


# =========================================================
# SPORTS
# =========================================================

SPORT_TERMS = (
    r"match(?:s|es)?", r"foot(?:ball)?", r"rugby", r"tennis", r"basket(?:ball)?",
    r"handball", r"volley(?:ball)?", r"cyclisme", r"athletisme", r"natation",
    r"boxe", r"mma", r"ufc", r"judo", r"combat(?:s|tant)?", r"k\.?o", r"knockout",
    r"tournoi", r"championnat", r"coupe du monde", r"coupe d'europe", r"euro \d{4}",
    r"jeux olympiques", r"jo", r"formule 1", r"f1", r"grand prix", r"moto ?gp",
    r"buteurs?", r"joueur(?:se)?s?", r"transferts?", r"mercato",
    r"ligue \d", r"ligue des champions", r"nba", r"nfl", r"sport(?:s|if|ive)?",
    r"football", r"soccer", r"game", r"fight", r"goals?", r"league",
)

# "contre" followed by a determiner is an everyday phrase ("contre le stress").
VERSUS_PATTERN = (
    r"[a-z0-9][\w'.-]*\s+"
    r"(?:vs\.?|versus|contre(?!\s+(?:l'|(?:le|la|les|un|une|des|du|de|ce|cette|ces|mon|ma|mes|son|sa|ses)(?![a-z]))))"
    r"\s+[a-z0-9][\w'.-]*"
)

FACED_TERMS = (
    r"a affronte", r"ont affronte", r"affrontera", r"face a", r"a joue contre",
    r"ont joue contre", r"jouera contre", r"rencontre entre", r"a battu",
    r"played against", r"faced",
)

DOMESTIC_LEAGUE_TERMS = (
    r"ligue 1", r"ligue 2", r"l1", r"top 14", r"pro d2", r"coupe de france",
    r"trophee des champions", r"psg", r"paris saint-germain", r"paris sg",
    r"om", r"olympique de marseille", r"ol", r"olympique lyonnais", r"losc",
    r"as monaco", r"stade rennais", r"ogc nice", r"rc lens", r"fc nantes",
    r"stade toulousain", r"stade francais", r"asm clermont", r"racing 92",
    r"tour de france", r"roland[- ]garros", r"betclic elite", r"starligue",
    r"equipe de france", r"les bleus", r"xv de france",
)

GLOBAL_LEAGUE_TERMS = (
    r"nba", r"nfl", r"mlb", r"nhl", r"mls", r"wnba", r"super bowl",
    r"premier league", r"la liga", r"serie a", r"bundesliga",
    r"champions league", r"europa league", r"euroleague",
    r"ufc", r"bellator", r"pfl", r"one championship", r"wwe", r"aew",
    r"formule 1", r"formula 1", r"f1", r"atp", r"wta", r"wimbledon",
    r"us open", r"open d'australie", r"australian open", r"pga",
)


# =========================================================
# TECH / GLOBAL WEB
# =========================================================

TECH_TERMS = (
    r"ia", r"intelligence artificielle", r"chatgpt", r"openai", r"gpt-?\d*",
    r"claude", r"gemini", r"mistral", r"llm", r"llms", r"prompt", r"machine learning",
    r"deep learning", r"saas", r"api", r"sdk", r"python", r"javascript", r"typescript",
    r"react", r"node(?:\.js)?", r"github", r"no-?code", r"low-?code", r"devops",
    r"cloud", r"aws", r"azure", r"startup", r"start-up", r"growth", r"growth hacking",
    r"marketing digital", r"seo", r"crypto(?:monnaies?)?", r"bitcoin",
    r"ethereum", r"blockchain", r"nft", r"web3", r"nvidia", r"framework",
)


# =========================================================
# RECENCY / IMMEDIACY
# =========================================================

IMMEDIACY_TERMS = (
    r"aujourd'?hui", r"hier", r"ce soir", r"ce matin", r"cette semaine",
    r"ce week-?end", r"ce mois(?:-ci)?", r"actuellement", r"en ce moment",
    r"maintenant", r"a l'heure actuelle", r"en direct", r"cette annee",
    r"today", r"yesterday", r"tonight", r"this week", r"currently", r"right now",
)

# A 4-digit number followed by decimals or a currency is an amount, not a year.
NOT_AN_AMOUNT_PATTERN = (
    r"(?![.,]\d)"
    r"(?!\s*(?:€|\$|£|(?:euros?|eur|dollars?|usd|chf)(?![a-z0-9])))"
)

VOLATILE_YEAR_PATTERN = r"20(?:2[3-9]|3\d)" + NOT_AN_AMOUNT_PATTERN

FUTURE_PHRASES = (
    r"dans le futur", r"a l'avenir", r"dans les annees a venir",
    r"dans les prochaines decennies", r"en l'an \d{4}",
)

IN_N_YEARS_PATTERN = r"dans (\d+) ans"


# =========================================================
# WEB REQUEST / ACTUALITY (broad "suggests web" set)
# =========================================================

WEB_REQUEST_TERMS = (
    r"google", r"internet", r"recherche", r"cherche sur", r"cherche moi",
    r"va voir", r"sur le web", r"en ligne", r"source", r"sources", r"lien",
    r"verifie", r"search",
)

ACTUALITY_TERMS = (
    r"actu(?:alite)?s?", r"news", r"infos?", r"informations? recentes?",
    r"nouveautes?", r"tendances?", r"quoi de neuf", r"dernieres nouvelles",
    r"breaking", r"buzz", r"sorti(?:e)?s?", r"date de sortie",
)


# =========================================================
# REAL ESTATE / ENTERTAINMENT (scoring drift detection)
# =========================================================

REAL_ESTATE_TERMS = (
    r"immobilier(?:e)?", r"appartements?", r"maisons? a vendre", r"a vendre",
    r"loyers?", r"locations?", r"m2", r"m²", r"metre carre", r"seloger",
    r"pap", r"agence immobiliere", r"notaire", r"credit immobilier",
    r"real estate", r"for sale", r"apartment", r"rent",
)

ENTERTAINMENT_TERMS = (
    r"series?", r"films?", r"saisons?", r"episodes?", r"acteurs?", r"actrices?",
    r"bande-annonce", r"casting", r"realisateur", r"cinema", r"box-office",
    r"documentaire", r"emission", r"telerealite", r"album", r"concert",
    r"chanteur", r"chanteuse", r"movies?", r"season", r"trailer", r"cast",
    r"original series", r"originals", r"show",
)


# =========================================================
# TRUSTED DOMAINS
# =========================================================

TRUSTED_DOMAINS = frozenset({
    "wikipedia.org", "wikidata.org",
    "gouv.fr", "service-public.fr", "legifrance.gouv.fr", "economie.gouv.fr",
    "assemblee-nationale.fr", "senat.fr", "elysee.fr", "vie-publique.fr",
    "insee.fr", "banque-france.fr", "europa.eu", "conseil-constitutionnel.fr",
    "meteofrance.com", "who.int", "un.org",
    "amazon.fr", "amazon.com", "netflix.com", "apple.com", "spotify.com",
    "disneyplus.com", "canalplus.com", "fnac.com", "darty.com", "orange.fr",
    "sfr.fr", "free.fr", "bouyguestelecom.fr", "sncf-connect.com", "youtube.com",
    "microsoft.com", "playstation.com", "xbox.com", "nintendo.com", "openai.com",
})

DOMESTIC_TLDS = (".fr",)


# =========================================================
# COUNTRIES
# =========================================================

COUNTRY_TERMS = {
    "usa": (
        r"etats-unis", r"etats unis", r"usa", r"u\.s\.a\.?", r"amerique",
        r"americain(?:e)?s?", r"aux us", r"new york", r"californie",
    ),
    "uk": (
        r"royaume-uni", r"royaume uni", r"angleterre", r"uk", r"londres",
        r"grande-bretagne", r"britanniques?",
    ),
    "canada": (r"canada", r"quebec", r"canadien(?:ne)?s?", r"montreal"),
    "switzerland": (r"suisse", r"geneve", r"zurich", r"lausanne"),
    "belgium": (r"belgique", r"bruxelles", r"belges?"),
    "spain": (r"espagne", r"madrid", r"barcelone"),
    "germany": (r"allemagne", r"berlin", r"munich"),
    "turkey": (r"turquie", r"istanbul", r"ankara", r"turcs?", r"turque"),
    "italy": (r"italie", r"rome"),
    "maghreb": (
        r"maghreb", r"maroc", r"marocain(?:e)?s?", r"algerie", r"algerien(?:ne)?s?",
        r"tunisie", r"tunisien(?:ne)?s?",
    ),
}

# country -> (language, interface language, geo code)
COUNTRY_LOCALES = {
    "france": ("fr", "fr", "fr"),
    "usa": ("en", "en", "us"),
    "uk": ("en", "en", "uk"),
    "canada": ("en", "en", "ca"),
    "switzerland": ("fr", "fr", "ch"),
    "belgium": ("fr", "fr", "be"),
    "spain": ("es", "es", "es"),
    "germany": ("de", "de", "de"),
    "turkey": ("tr", "tr", "tr"),
    "italy": ("it", "it", "it"),
    "maghreb": ("fr", "fr", "ma"),
}

COUNTRY_ALIASES = {
    "fr": "france", "french": "france", "francais": "france",
    "us": "usa", "united states": "usa", "etats-unis": "usa", "america": "usa",
    "gb": "uk", "united kingdom": "uk", "royaume-uni": "uk", "england": "uk",
    "ch": "switzerland", "suisse": "switzerland",
    "be": "belgium", "belgique": "belgium",
    "es": "spain", "espagne": "spain",
    "de": "germany", "allemagne": "germany",
    "tr": "turkey", "turquie": "turkey",
    "it": "italy", "italie": "italy",
    "ma": "maghreb", "maroc": "maghreb", "morocco": "maghreb",
    "algeria": "maghreb", "algerie": "maghreb", "tunisia": "maghreb", "tunisie": "maghreb",
    "ca": "canada",
}


# =========================================================
# FOLLOW-UP TRIGGERS / GREETINGS
# =========================================================

FOLLOWUP_TRIGGER_TERMS = (
    r"reponds?(?: moi)? a (?:ma|la) (?:derniere |precedente )?question(?: precedente| d'avant)?",
    r"ma question precedente", r"ma question d'avant", r"ma derniere question",
    r"tu n'as pas repondu", r"t'as pas repondu", r"tu n'a pas repondu",
    r"et du coup \?", r"alors \?",
    r"answer my (?:previous|last) question", r"you didn'?t answer",
)

# Words that may surround a trigger without making the message a new question.
FOLLOWUP_FILLER = frozenset({
    "question", "questions", "repondu", "repondre", "reponse", "hein", "bon",
    "ben", "bah", "please", "tdai", "toujours", "rien", "precedente", "avant",
})

GREETING_TERMS = (
    r"salut", r"bonjour", r"bonsoir", r"coucou", r"hello", r"hey", r"hi",
    r"yo", r"wesh", r"merci(?: beaucoup)?", r"bonne (?:journee|soiree|nuit)",
    r"a plus", r"bye", r"ca va", r"comment ca va", r"tu vas bien", r"ok",
    r"d'accord", r"super", r"top", r"cool", r"thanks",
)
