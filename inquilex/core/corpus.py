"""
Inquilex Corpus
Legal term and statute definitions for the Lei do Inquilinato (Lei nº 8.245/91)
"""

import re
import json
import yaml
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Optional, Union
import logging

from .errors import CorpusError

logger = logging.getLogger(__name__)

# Embedded corpus. Bare strings are glossary entries; records carrying
# full_text are statute articles.
CORPUS_YAML = """
locador: "Definição Jurídica: É a parte que detém a propriedade ou o direito de uso de um imóvel e o cede a outra parte (locatário) para uso, mediante remuneração (aluguel). Suas principais obrigações incluem entregar o imóvel em estado de servir ao uso a que se destina e garantir o uso pacífico do bem."
locatário: "Definição Jurídica: Conhecido como inquilino, é a parte que recebe o imóvel para uso, comprometendo-se ao pagamento do aluguel e demais encargos. Deve zelar pela conservação do imóvel como se fosse seu, restituindo-o no final do contrato no estado em que o recebeu, salvo as deteriorações decorrentes do uso normal."
fiador: "Definição Jurídica: É um terceiro que se obriga pessoalmente pelo pagamento das dívidas do locatário, caso este não cumpra suas obrigações. A fiança é uma garantia pessoal e o fiador responde com seu patrimônio, incluindo, em alguns casos, seu único imóvel residencial (bem de família)."
caução: "Definição: Garantia locatícia que consiste no depósito em dinheiro (geralmente até 3 meses de aluguel) em uma conta poupança. O valor é devolvido ao locatário ao final do contrato, se não houver débitos."
fiança: "Definição: Modalidade de garantia em que um terceiro (fiador) garante o pagamento do aluguel e demais encargos caso o locatário se torne inadimplente."
despejo: "Definição Jurídica: É o procedimento judicial específico pelo qual o locador busca a desocupação do imóvel e a retomada de sua posse, encerrando a relação locatícia. Pode ser motivada por falta de pagamento (causa mais comum), infração contratual, término do contrato, entre outras hipóteses previstas em lei."
denúncia vazia: "Definição: Rescisão do contrato de locação pelo locador, sem a necessidade de apresentar uma justificativa. É aplicável em contratos com prazo indeterminado ou ao final do prazo determinado, conforme regras específicas da lei."
denúncia cheia: "Definição: Rescisão do contrato de locação pelo locador, baseada em uma justificativa prevista em lei, como a necessidade do imóvel para uso próprio ou a realização de obras urgentes."
benfeitorias: "Definição: Obras ou despesas realizadas no imóvel para conservá-lo, melhorá-lo ou embelezá-lo. Podem ser necessárias, úteis ou voluptuárias, e seu ressarcimento depende do que foi acordado em contrato."
direito de preferência: "Definição: Direito do locatário de ter prioridade na compra do imóvel alugado, caso o locador decida vendê-lo. O locador deve oferecer o imóvel ao locatário nas mesmas condições oferecidas a terceiros."
lei nº 8.245/91: "Lei do Inquilinato (Lei nº 8.245/91): É a principal legislação federal que regula as locações de imóveis urbanos no Brasil. Ela estabelece os direitos e deveres de locadores e locatários, os tipos de garantias, as regras para reajuste de aluguel e as ações judiciais pertinentes, como o despejo."

art. 4º:
  summary: "Durante o prazo do contrato o locador não pode reaver o imóvel. O locatário pode devolvê-lo antes do fim, pagando a multa pactuada proporcional ao período de cumprimento do contrato ou, na falta dela, a fixada judicialmente."
  full_text: "Art. 4º - Durante o prazo estipulado para a duração do contrato, não poderá o locador reaver o imóvel alugado. Com exceção do que estipula o § 2o do art. 54-A, o locatário, todavia, poderá devolvê-lo, pagando a multa pactuada, proporcional ao período de cumprimento do contrato, ou, na sua falta, a que for judicialmente estipulada."

art. 5º:
  summary: "Qualquer que seja o motivo do término da locação, a ação cabível para o locador retomar o imóvel é a ação de despejo."
  full_text: "Art. 5º - Seja qual for o fundamento do término da locação, a ação do locador para reaver o imóvel é a de despejo."

art. 6º:
  summary: "Na locação por prazo indeterminado, o locatário pode encerrar o contrato avisando o locador por escrito com pelo menos trinta dias de antecedência."
  full_text: "Art. 6º - O locatário poderá denunciar a locação por prazo indeterminado mediante aviso por escrito ao locador, com antecedência mínima de trinta dias."

art. 23:
  summary: "Resume as principais obrigações do locatário, incluindo: pagar o aluguel em dia, usar o imóvel para o fim combinado, zelar pela sua conservação, reparar danos causados por si, e devolver o imóvel no mesmo estado em que o recebeu (salvo o desgaste natural)."
  full_text: |-
    Art. 23 - O locatário é obrigado a:
    I - pagar pontualmente o aluguel e os encargos da locação, legal ou contratualmente exigíveis, no prazo estipulado ou, em sua falta, até o sexto dia útil do mês seguinte ao vencido, no imóvel locado, quando outro local não tiver sido indicado no contrato;
    II - servir-se do imóvel para o uso convencionado ou presumido, compatível com a natureza deste e com o fim a que se destina, devendo tratá-lo com o mesmo cuidado como se fosse seu;
    III - restituir o imóvel, finda a locação, no estado em que o recebeu, salvo as deteriorações decorrentes do seu uso normal;
    IV - levar imediatamente ao conhecimento do locador o surgimento de qualquer dano ou defeito cuja reparação a este incumba, bem como as eventuais turbações de terceiros;
    V - realizar a imediata reparação dos danos verificados no imóvel, ou nas suas instalações, provocadas por si, seus dependentes, familiares, visitantes ou prepostos;
    VI - não modificar a forma interna ou externa do imóvel sem o consentimento prévio e por escrito do locador;
    VII - entregar imediatamente ao locador os documentos de cobrança de tributos e encargos condominiais, bem como qualquer intimação, multa ou exigência de autoridade pública, ainda que dirigidas a ele, locatário;
    VIII - pagar as despesas de telefone e de consumo de força, luz e gás, água e esgoto;
    IX - permitir a vistoria do imóvel pelo locador ou por seu mandatário, mediante combinação prévia de dia e hora, bem como admitir que seja o mesmo visitado e examinado por terceiros, na hipótese de venda, promessa de venda, cessão ou promessa de cessão de direitos ou dação em pagamento;
    X - cumprir integralmente a convenção de condomínio e os regulamentos internos;
    XI - pagar o prêmio do seguro de fiança;
    XII - pagar as despesas ordinárias de condomínio.

art. 46:
  summary: "Regula contratos de locação residencial com prazo de 30 meses ou mais. Ao final do prazo, o contrato termina automaticamente. Se o inquilino permanecer no imóvel por mais de 30 dias sem oposição do locador, o contrato é prorrogado por prazo indeterminado."
  full_text: "Art. 46 - Nas locações ajustadas por escrito e por prazo igual ou superior a trinta meses, a resolução do contrato ocorrerá findo o prazo estipulado, independentemente de notificação ou aviso. § 1º Findo o prazo ajustado, se o locatário continuar na posse do imóvel alugado por mais de trinta dias sem oposição do locador, presumir-se-á prorrogada a locação por prazo indeterminado, mantidas as demais cláusulas e condições do contrato."

art. 47:
  summary: "Aplica-se a contratos de locação residencial com prazo inferior a 30 meses (ou verbais). Findo o prazo, o contrato é prorrogado automaticamente. O locador só pode reaver o imóvel em situações específicas previstas em lei (ex: para uso próprio)."
  full_text: "Art. 47 - Quando ajustada verbalmente ou por escrito e com prazo inferior a trinta meses, findo o prazo estabelecido, a locação prorroga-se automaticamente, por prazo indeterminado, somente podendo ser retomado o imóvel nos casos previstos nos incisos deste artigo (ex: uso próprio, descumprimento, obras, etc.)."
"""

# "Artigo 23", "art.23", "ART.  23" -> "art. 23"
_CITATION_PREFIX = re.compile(r'^(?:artigo|art\.)\s*', re.IGNORECASE)
_ORDINAL_MARKERS = re.compile(r'(?<=\d)[º°]')
_WHITESPACE = re.compile(r'\s+')


def normalize_key(text: str) -> str:
    """
    Fold a term or citation into its canonical lookup key

    Args:
        text: Matched text or raw corpus key

    Returns:
        Lowercase key with citation words folded and ordinal markers removed
    """
    key = _WHITESPACE.sub(' ', text.strip().lower())
    key = _CITATION_PREFIX.sub('art. ', key)
    return _ORDINAL_MARKERS.sub('', key)


def humanize_key(key: str) -> str:
    """Human-readable form of a key: 'art. 23' -> 'Artigo 23'"""
    return _ORDINAL_MARKERS.sub('', key.replace('art. ', 'Artigo '))


def display_title(key: str) -> str:
    """Title shown in search results and the full-text view: 'art. 23' -> 'ARTIGO 23'"""
    return humanize_key(key).upper()


@dataclass(frozen=True)
class DefinitionRecord:
    """A single corpus entry"""
    key: str
    summary: str
    full_text: Optional[str] = None

    @property
    def is_citation(self) -> bool:
        """Statute articles carry their full text and get the extra actions"""
        return self.full_text is not None

    @property
    def term_class(self) -> str:
        return "citation" if self.is_citation else "glossary"

    @property
    def content(self) -> str:
        """Text the search ranker scores against"""
        if self.full_text is None:
            return self.summary
        return f"{self.summary} {self.full_text}"


class Corpus(Mapping):
    """
    Read-only mapping from canonical key to DefinitionRecord

    Iteration order is the load order of the underlying asset.
    """

    def __init__(self, records: Dict[str, DefinitionRecord]):
        self._records = MappingProxyType(dict(records))

    def __getitem__(self, key: str) -> DefinitionRecord:
        return self._records[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"Corpus({len(self)} entries)"

    def lookup(self, text: str) -> Optional[DefinitionRecord]:
        """Look up a term by its raw (non-normalized) text"""
        return self._records.get(normalize_key(text))

    def citations(self) -> List[DefinitionRecord]:
        return [record for record in self._records.values() if record.is_citation]

    def glossary_terms(self) -> List[DefinitionRecord]:
        return [record for record in self._records.values() if not record.is_citation]

    def get_stats(self) -> Dict[str, int]:
        """Get statistics about the corpus"""
        citations = len(self.citations())
        return {
            'total_terms': len(self),
            'citations': citations,
            'glossary_terms': len(self) - citations,
        }


def _to_record(raw_key: Any, value: Any) -> DefinitionRecord:
    """Unify a bare string or a {summary, full_text} mapping into a record"""
    if not isinstance(raw_key, str) or not raw_key.strip():
        raise CorpusError("keys must be non-empty strings", key=str(raw_key))

    key = normalize_key(raw_key)

    if isinstance(value, str):
        return DefinitionRecord(key=key, summary=value)

    if isinstance(value, dict):
        summary = value.get('summary')
        # fullText is the spelling used by the original front-end asset
        full_text = value.get('full_text', value.get('fullText'))
        if not isinstance(summary, str) or not summary:
            raise CorpusError("record is missing a 'summary' string", key=raw_key)
        if full_text is not None and not isinstance(full_text, str):
            raise CorpusError("'full_text' must be a string", key=raw_key)
        return DefinitionRecord(key=key, summary=summary, full_text=full_text)

    raise CorpusError(f"unsupported value type {type(value).__name__}", key=raw_key)


def parse_entries(raw: Optional[Dict[str, Any]]) -> Dict[str, DefinitionRecord]:
    """
    Convert a raw key -> value mapping into canonical records

    Args:
        raw: Mapping as loaded from YAML/JSON (None is treated as empty)

    Returns:
        Ordered dictionary of canonical key -> DefinitionRecord
    """
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise CorpusError(f"corpus must be a mapping, got {type(raw).__name__}")

    records = {}
    for raw_key, value in raw.items():
        record = _to_record(raw_key, value)
        if record.key in records:
            logger.warning(f"Duplicate corpus key '{record.key}' (from '{raw_key}'), keeping the last one")
        records[record.key] = record

    return records


def read_corpus_file(path: Union[str, Path]) -> Dict[str, DefinitionRecord]:
    """Read a YAML or JSON corpus file"""
    path = Path(path)
    if not path.exists():
        raise CorpusError(f"corpus file not found: {path}")

    try:
        text = path.read_text(encoding='utf-8')
        if path.suffix.lower() == '.json':
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise CorpusError(f"failed to read corpus file {path}: {e}") from e

    return parse_entries(raw)


def load_corpus(path: Optional[Union[str, Path]] = None,
                custom_entries: Optional[Dict[str, Any]] = None) -> Corpus:
    """
    Load the corpus

    Args:
        path: Optional YAML/JSON corpus file replacing the embedded asset
        custom_entries: Optional raw entries added on top (override on key clash)

    Returns:
        Read-only Corpus
    """
    if path:
        records = read_corpus_file(path)
        source = str(path)
    else:
        records = parse_entries(yaml.safe_load(CORPUS_YAML))
        source = "embedded asset"

    if custom_entries:
        records.update(parse_entries(custom_entries))

    corpus = Corpus(records)
    stats = corpus.get_stats()
    logger.info(f"Loaded corpus from {source} with {stats['total_terms']} terms "
                f"({stats['citations']} citations)")
    return corpus
